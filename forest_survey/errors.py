# forest_survey/errors.py


class SurveyError(Exception):
    """Base class for failures that abort a survey run.

    ``step`` is filled in by the pipeline with the name of the step that was
    running when the error was raised.
    """

    step = None


class DataFormatError(SurveyError, ValueError):
    """Input file is missing, has the wrong layout or holds bad values."""


class FeatureMismatchError(DataFormatError):
    """A view does not match the feature domain a model was trained on."""


class LabelMismatchError(SurveyError, ValueError):
    """A predicted label is not a level of the true-label domain."""


class FitError(SurveyError, RuntimeError):
    """A model could not be fitted to the training rows."""
