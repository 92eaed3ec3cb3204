# pages/0_Data_Summary.py
import streamlit as st
from forest_survey.config import *
from forest_survey.diagnostics import correlation_matrix, summary_statistics
from forest_survey.plots import plot_correlation
from forest_survey.selection import best_per_size

st.title("📋 Survey Data Summary")

if 'results' in st.session_state:
    results = st.session_state['results']

    # ==========================================
    # 1. VIEWS
    # ==========================================
    view_name = st.radio("View:", list(results.views), horizontal=True)
    view = results.views[view_name]

    m_col1, m_col2, m_col3 = st.columns(3)
    m_col1.metric("Sites", f"{len(view):,}")
    m_col2.metric("Aspect Classes", view[COL_ASPECT].cat.categories.size)
    m_col3.metric("Forest Present", f"{(view[COL_FOREST] == POSITIVE_LABEL).mean():.1%}")

    numeric, levels = summary_statistics(view)
    tab_num, tab_nom, tab_raw = st.tabs(["Numeric Fields", "Nominal Fields", "Rows"])
    with tab_num:
        st.dataframe(numeric.round(3), use_container_width=True)
    with tab_nom:
        st.dataframe(levels, use_container_width=True, hide_index=True)
    with tab_raw:
        st.dataframe(view, use_container_width=True, height=300)

    # ==========================================
    # 2. CORRELATION
    # ==========================================
    st.subheader("🔗 Correlation Matrix")
    corr = correlation_matrix(results.raw)
    st.pyplot(plot_correlation(corr))

    # ==========================================
    # 3. BEST SUBSETS
    # ==========================================
    st.subheader("🏆 Best-Subset Selection (BIC)")
    if view_name in results.subsets:
        table = results.subsets[view_name]
        col_b1, col_b2 = st.columns(2)
        with col_b1:
            st.caption("Top subsets")
            st.dataframe(table.head(BEST_SUBSET_ROWS).round(2), use_container_width=True)
        with col_b2:
            st.caption("Best subset per size")
            st.dataframe(best_per_size(table).round(2), use_container_width=True)

    st.markdown("---")
    col_n1, col_n2 = st.columns([1, 1])
    with col_n1:
        if st.button("⬅️ Back to Home"): st.switch_page("ForestSurvey_app.py")
    with col_n2:
        if st.button("Model Fit ➡️"): st.switch_page("pages/1_Model_Fit.py")
else:
    st.warning("No survey results loaded. Go back to Home and check the settings.")
