# forest_survey/config.py

# --- DATASET CONFIGURATION ---
DATA_FILENAME = "forest_survey.csv"

# Column Definitions (renamed by position, header names in the file are ignored)
COL_TPI = 'TPI'
COL_GRADIENT = 'Gradient'
COL_ASPECT4 = 'Aspect4'
COL_ASPECT5 = 'Aspect5'   # Duplicate encoding, never modelled
COL_ASPECT8 = 'Aspect8'
COL_WIND = 'Wind'
COL_BUFFER = 'Buffer'
COL_FOREST = 'Forest'     # Label

RAW_COLUMNS = [
    COL_TPI, COL_GRADIENT, COL_ASPECT4, COL_ASPECT5,
    COL_ASPECT8, COL_WIND, COL_BUFFER, COL_FOREST
]

NUMERIC_COLUMNS = [COL_GRADIENT, COL_WIND, COL_BUFFER]

# View Logic
# Each view keeps one aspect encoding, renamed to COL_ASPECT
COL_ASPECT = 'Aspect'
VIEWS = {
    "4-class": COL_ASPECT4,
    "8-class": COL_ASPECT8,
}
VIEW_COLUMNS = [COL_TPI, COL_GRADIENT, COL_ASPECT, COL_WIND, COL_BUFFER, COL_FOREST]
NOMINAL_COLUMNS = [COL_TPI, COL_ASPECT, COL_FOREST]
PREDICTORS = [COL_TPI, COL_GRADIENT, COL_ASPECT, COL_WIND, COL_BUFFER]

# Labels
POSITIVE_LABEL = "1"   # Forest present
NEGATIVE_LABEL = "0"   # Forest absent
LABELS = [NEGATIVE_LABEL, POSITIVE_LABEL]

# Parameters
TRAIN_FRACTION = 0.7
RANDOM_STATE = 123
N_ESTIMATORS = 500
DECISION_THRESHOLD = 0.5

# Tree stopping and pruning rules (recursive partitioning defaults)
TREE_MIN_SAMPLES_SPLIT = 20
TREE_MIN_SAMPLES_LEAF = 7
TREE_MAX_DEPTH = 30
TREE_CP = 0.01   # complexity parameter, a fraction of the root node impurity

# Best-subset table length
BEST_SUBSET_ROWS = 10

# Model Artifacts
MODEL_DIR = "models"
MODEL_FILENAME = "{kind}_{view}.pkl"

# Report Output
REPORT_DIR = "report"
REPORT_FILENAME = "forest_survey_report.html"
