# pages/1_Model_Fit.py
import streamlit as st
from forest_survey.config import *
from forest_survey.diagnostics import (coefficient_table, fit_summary, half_normal_residuals,
                                       importance_table, tree_text)
from forest_survey.models import MODEL_NAMES, ModelKind
from forest_survey.plots import plot_half_normal, plot_tree_diagram

st.title("📈 Explanatory Model Fit")

if 'results' in st.session_state:
    results = st.session_state['results']

    col_sel1, col_sel2 = st.columns(2)
    with col_sel1:
        view_name = st.selectbox("View:", list(results.views))
    with col_sel2:
        kind = st.selectbox("Model:", list(ModelKind), format_func=lambda k: MODEL_NAMES[k])

    model = results.explanatory[(kind, view_name)]
    st.caption(f"Fitted to all {model.n_train} sites of the {view_name} view.")

    summary = fit_summary(model)
    cols = st.columns(len(summary) - 2)
    for col, (key, value) in zip(cols, [(k, v) for k, v in summary.items() if k not in ('Model', 'View')]):
        col.metric(key, f"{value:.3f}" if isinstance(value, float) else f"{value}")

    if kind is ModelKind.LOGISTIC:
        st.subheader("Coefficients")
        st.dataframe(coefficient_table(model).round(4), use_container_width=True)

        st.subheader("Half-normal Plot of Deviance Residuals")
        st.pyplot(plot_half_normal(half_normal_residuals(model), f"Half-normal plot ({view_name})"))

    elif kind is ModelKind.TREE:
        style = st.radio("Rendering:", ["detailed", "compact", "text"], horizontal=True)
        if style == "text":
            st.code(tree_text(model), language=None)
        else:
            st.pyplot(plot_tree_diagram(model, style))

        st.subheader("Feature Importance")
        st.dataframe(importance_table(model, by_predictor=True), use_container_width=True, hide_index=True)

    else:
        st.subheader("Feature Importance")
        by_predictor = st.toggle("Sum dummy columns per predictor", value=True)
        st.dataframe(importance_table(model, by_predictor=by_predictor),
                     use_container_width=True, hide_index=True)

    st.markdown("---")
    col_n1, col_n2 = st.columns([1, 1])
    with col_n1:
        if st.button("⬅️ Data Summary"): st.switch_page("pages/0_Data_Summary.py")
    with col_n2:
        if st.button("Accuracy ➡️"): st.switch_page("pages/2_Accuracy.py")
else:
    st.warning("No survey results loaded. Go back to Home and check the settings.")
