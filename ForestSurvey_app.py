# ForestSurvey_app.py
import streamlit as st
from forest_survey.components import render_model_controls, render_sidebar_settings
from forest_survey.config import POSITIVE_LABEL
from forest_survey.utils import load_survey_results

# 1. GLOBAL CONFIGURATION (Must be first)
st.set_page_config(page_title="Forest Survey", layout="wide")

# ==========================================
# 2. SIDEBAR (Global Controls)
# ==========================================
settings = render_sidebar_settings()
n_estimators, threshold = render_model_controls()

# ==========================================
# 3. PIPELINE (cached per settings)
# ==========================================
results = load_survey_results(
    settings['csv_path'],
    train_fraction=settings['train_fraction'],
    seed=settings['seed'],
    n_estimators=n_estimators,
    threshold=threshold,
    example=settings['example'],
)

if results is not None:
    st.session_state['results'] = results
    st.session_state['results_loaded'] = True
else:
    st.session_state.pop('results', None)
    st.session_state['results_loaded'] = False

# ==========================================
# 4. LANDING PAGE CONTENT
# ==========================================
def landing_page():
    st.title("🌲 Forest Survey")
    st.subheader("Which environmental covariates predict forest presence?")
    st.markdown("---")

    col1, col2 = st.columns([3, 2])

    with col1:
        st.markdown("### 👋 Overview")
        site_count = len(results.raw) if results is not None else 0

        st.markdown(
            f"""
            Three classifiers are fitted to every survey site and compared on the
            same held-out sites:
            * **Logistic GLM** (binomial, dummy-coded factors)
            * **Classification Tree** (recursive partitioning)
            * **Random Forest** (bootstrapped trees, majority vote)

            **Current Run:**
            * **Sites Loaded:** {site_count:,}
            * **Training Fraction:** {settings['train_fraction']:.0%} (seed {settings['seed']})
            * **Forest Size:** {n_estimators} trees
            """
        )

        st.write("")
        if st.session_state.get('results_loaded'):
            if st.button("🏁 Start (Go to Data Summary)", type="primary", use_container_width=True):
                st.switch_page("pages/0_Data_Summary.py")
        else:
            st.error("The survey could not be loaded or modelled. Check the CSV path in the sidebar.")

    with col2:
        st.markdown("### 🧠 Reading the Results")

        with st.expander("🧭 4-class vs 8-class views", expanded=False):
            st.write(
                """
                Both views hold the same sites. They differ only in how finely the
                slope aspect is classified (4 or 8 compass sectors). Every model is
                fitted once per view and only ever scored on its own view.
                """
            )

        with st.expander("🎯 Decision threshold", expanded=False):
            st.write(
                f"""
                The logistic model returns P(Forest = {POSITIVE_LABEL}). Sites with a probability
                above **{threshold}** are predicted as forest. Trees and forests vote
                on labels directly.
                """
            )

        with st.expander("📊 Accuracy", expanded=False):
            st.write(
                """
                Accuracy is the share of held-out sites whose predicted label equals
                the observed one (the trace of the confusion matrix over its total).
                """
            )

    st.markdown("---")
    st.caption("Forest Survey | Powered by statsmodels, scikit-learn & Streamlit")

# ==========================================
# 5. NAVIGATION SETUP
# ==========================================
pages = [
    st.Page(landing_page, title="Home", icon="🏠"),
    st.Page("pages/0_Data_Summary.py", title="Data Summary", icon="📋"),
    st.Page("pages/1_Model_Fit.py", title="Model Fit", icon="📈"),
    st.Page("pages/2_Accuracy.py", title="Accuracy", icon="🎯"),
]

pg = st.navigation(pages)
pg.run()
