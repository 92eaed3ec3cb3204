# pages/2_Accuracy.py
import altair as alt
import streamlit as st
from forest_survey.config import *
from forest_survey.models import MODEL_NAMES
from forest_survey.pipeline import accuracy_table

st.title("🎯 Out-of-sample Accuracy")

if 'results' in st.session_state:
    results = st.session_state['results']
    settings = results.settings

    st.caption(
        f"Trained on {len(results.train_idx)} sites, scored on the same {len(results.test_idx)} "
        f"held-out sites for every model and view (seed {settings['seed']})."
    )

    # ==========================================
    # 1. COMPARISON CHART
    # ==========================================
    acc = accuracy_table(results.evaluations)

    chart = alt.Chart(acc).mark_bar().encode(
        x=alt.X('Model:N', title=None),
        xOffset='View:N',
        y=alt.Y('Accuracy:Q', scale=alt.Scale(domain=[0, 1])),
        color=alt.Color('View:N', scale=alt.Scale(scheme='greens')),
        tooltip=['Model', 'View', alt.Tooltip('Accuracy:Q', format='.3f'), 'Test Rows']
    ).properties(height=350)
    st.altair_chart(chart, use_container_width=True)

    best = acc.loc[acc['Accuracy'].idxmax()]
    st.success(f"Best: **{best['Model']}** on the {best['View']} view ({best['Accuracy']:.3f}).")

    # ==========================================
    # 2. CONFUSION MATRICES
    # ==========================================
    st.subheader("Confusion Matrices")
    st.caption("Rows are predicted labels, columns are observed labels "
               f"({POSITIVE_LABEL} = forest present).")

    for view_name in results.views:
        st.markdown(f"**{view_name} view**")
        cols = st.columns(len(MODEL_NAMES))
        for col, kind in zip(cols, MODEL_NAMES):
            ev = results.evaluations.get((kind, view_name))
            if ev is None:
                continue
            with col:
                st.caption(f"{MODEL_NAMES[kind]}: {ev.accuracy:.3f}")
                st.dataframe(ev.confusion, use_container_width=True)

    csv = acc.to_csv(index=False).encode('utf-8')
    st.download_button("📥 Download Accuracy CSV", csv, 'model_accuracy.csv', 'text/csv', type="primary")

    st.markdown("---")
    if st.button("⬅️ Model Fit"): st.switch_page("pages/1_Model_Fit.py")
else:
    st.warning("No survey results loaded. Go back to Home and check the settings.")
