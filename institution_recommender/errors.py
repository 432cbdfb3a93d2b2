# institution_recommender/errors.py


class RecommenderError(RuntimeError):
    """Base class for failures surfaced by the model registry."""


class DatasetEmpty(RecommenderError):
    """
    Raised at build time when a dataset has no records.
    Fatal for that dataset only; other models keep working.
    """

    def __init__(self, dataset_key):
        self.dataset_key = dataset_key
        super().__init__(f"No training data found for dataset: {dataset_key}")


class ModelNotFound(RecommenderError):
    """Unknown dataset key at predict / validate / evaluate time."""

    def __init__(self, dataset_key):
        self.dataset_key = dataset_key
        super().__init__(f"Model not found for dataset: {dataset_key}")


class Unclassifiable(RecommenderError):
    """Classification hit a dead end and no fallback context was available."""

    def __init__(self, dataset_key):
        self.dataset_key = dataset_key
        super().__init__(f"Could not classify input for dataset: {dataset_key}")
