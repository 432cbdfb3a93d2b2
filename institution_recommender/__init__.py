from .errors import DatasetEmpty, ModelNotFound, RecommenderError, Unclassifiable
from .registry import Dataset, Model, ModelRegistry, ValidationResult

__all__ = [
    'Dataset', 'Model', 'ModelRegistry', 'ValidationResult',
    'RecommenderError', 'DatasetEmpty', 'ModelNotFound', 'Unclassifiable',
]
