# forest_survey/components.py
import streamlit as st
from .config import *

def render_sidebar_settings():
    st.sidebar.header("Run Settings")

    # Reset Button
    if st.sidebar.button("🔄 Reset Settings"):
        st.session_state.clear()
        st.rerun()

    use_example = st.sidebar.toggle(
        "Use example survey", value=False,
        help="Runs on a generated dataset with the same layout when no survey file is at hand."
    )
    csv_path = st.sidebar.text_input("Survey CSV:", DATA_FILENAME, disabled=use_example)

    train_fraction = st.sidebar.slider("Training fraction", 0.5, 0.9, TRAIN_FRACTION, step=0.05)
    seed = int(st.sidebar.number_input("Random seed", min_value=0, value=RANDOM_STATE, step=1))

    return {
        'csv_path': csv_path,
        'example': use_example,
        'train_fraction': train_fraction,
        'seed': seed,
    }

def render_model_controls():
    st.sidebar.header("Model Settings")

    n_estimators = st.sidebar.slider(
        "Forest size (trees)", 50, 1000, N_ESTIMATORS, step=50
    )
    threshold = st.sidebar.slider(
        "Logistic decision threshold", 0.05, 0.95, DECISION_THRESHOLD, step=0.05,
        help="Sites with P(Forest present) above this value are labelled 1."
    )

    return n_estimators, threshold
