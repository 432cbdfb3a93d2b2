# institution_recommender/registry.py
import threading
from collections import namedtuple
from types import MappingProxyType

from loguru import logger
from sklearn import metrics

from . import config
from .errors import DatasetEmpty, ModelNotFound, RecommenderError, Unclassifiable
from .id3 import (
    build_tree, classify, count_leaves, frequencies, information_gain,
    majority_class, predict, tree_depth,
)


class Dataset(namedtuple('Dataset', ['key', 'records', 'test_records'])):
    """
    Labeled records for one dataset key, as handed over by the loader.
    `test_records` is the held-out part used by evaluate() (may be empty).
    """

    __slots__ = ()

    def __new__(cls, key, records, test_records=()):
        return super().__new__(cls, key, tuple(records), tuple(test_records))


# immutable snapshot; a rebuild produces a new Model instead of editing this one
Model = namedtuple('Model', [
    'dataset_key', 'records', 'test_records', 'attributes', 'target', 'tree', 'vocabulary',
])


InvalidValue = namedtuple('InvalidValue', ['attribute', 'value', 'valid_options'])


class ValidationResult:
    """
    Outcome of ModelRegistry.validate().

    `error` is only set when the dataset key is unknown (a ModelNotFound instance);
    the caller is expected to turn the lists into user-facing messages.
    """

    def __init__(self, missing_attributes=None, invalid_attributes=None, error=None):
        self.missing_attributes = list(missing_attributes or [])
        self.invalid_attributes = list(invalid_attributes or [])
        self.error = error

    @property
    def valid(self):
        return self.error is None and not self.missing_attributes and not self.invalid_attributes

    def __bool__(self):
        return self.valid

    def __repr__(self):
        return (f"ValidationResult(valid={self.valid}, missing={self.missing_attributes}, "
                f"invalid={self.invalid_attributes}, error={self.error!r})")

    def to_dict(self):
        out = {
            'valid': self.valid,
            'missingAttributes': self.missing_attributes,
            'invalidAttributes': [
                {'attribute': i.attribute, 'value': i.value, 'validOptions': list(i.valid_options)}
                for i in self.invalid_attributes
            ],
        }
        if self.error is not None:
            out['error'] = str(self.error)
        return out


class ModelRegistry:
    """
    One ID3 model per dataset key.

    - build(dataset) trains a tree once and swaps it in (copy-on-write), so
      concurrent readers see either the old model or the new one, never a mix
    - validate / predict / evaluate / stats only read the stored Model
    """

    def __init__(self, target_candidates=None, target_aliases=None, default_target=None,
                 reserved_columns=None):
        self.target_candidates = list(target_candidates or config.TARGET_CANDIDATES)
        self.target_aliases = list(target_aliases or config.TARGET_ALIASES)
        self.default_target = default_target or config.DEFAULT_TARGET
        self.reserved_columns = tuple(reserved_columns if reserved_columns is not None
                                      else config.RESERVED_COLUMNS)
        self._models = {}
        self._write_lock = threading.Lock()

    # -------------------------
    # Model building
    # -------------------------
    def resolve_target(self, record):
        """First matching label column in priority order, else the default target."""
        for candidate in self.target_candidates:
            if candidate in record:
                return candidate
        lowered = {str(k).lower(): k for k in record}
        for alias in self.target_aliases:
            if alias in lowered:
                return lowered[alias]
        return self.default_target

    def feature_attributes(self, record, target):
        return [a for a in record if a != target and a not in self.reserved_columns]

    def build(self, dataset):
        if not dataset.records:
            raise DatasetEmpty(dataset.key)

        logger.info(f"Building model for {dataset.key} dataset...")
        records = dataset.records
        target = self.resolve_target(records[0])
        if target not in records[0]:
            logger.warning(f"Dataset {dataset.key}: no label column found, using '{target}'")
        attributes = self.feature_attributes(records[0], target)

        tree = build_tree(list(records), attributes, target)
        vocabulary = MappingProxyType({a: tuple(frequencies(records, a)) for a in attributes})
        model = Model(dataset.key, records, dataset.test_records, tuple(attributes), target,
                      tree, vocabulary)

        with self._write_lock:
            models = dict(self._models)
            models[dataset.key] = model
            self._models = models

        logger.info(f"Model built successfully for {dataset.key} with {len(attributes)} attributes")
        return model

    def build_all(self, datasets):
        """Build every dataset; a failing dataset is logged and skipped."""
        built = {}
        for dataset in datasets:
            try:
                built[dataset.key] = self.build(dataset)
            except RecommenderError as e:
                logger.warning(f"Skipping dataset {dataset.key}: {e}")
        return built

    # -------------------------
    # Lookups
    # -------------------------
    @property
    def models(self):
        return MappingProxyType(self._models)

    def dataset_keys(self):
        return list(self._models)

    def __contains__(self, dataset_key):
        return dataset_key in self._models

    def get(self, dataset_key):
        model = self._models.get(dataset_key)
        if model is None:
            raise ModelNotFound(dataset_key)
        return model

    # -------------------------
    # Validation / prediction
    # -------------------------
    def validate(self, input_record, dataset_key):
        model = self._models.get(dataset_key)
        if model is None:
            return ValidationResult(error=ModelNotFound(dataset_key))

        missing = [a for a in model.attributes if not input_record.get(a)]
        invalid = []
        for attribute in model.attributes:
            value = input_record.get(attribute)
            options = model.vocabulary[attribute]
            if value and value not in options:
                invalid.append(InvalidValue(attribute, value, list(options)))

        result = ValidationResult(missing, invalid)
        if not result.valid:
            logger.debug(f"Validation failed for {dataset_key}: {result}")
        return result

    def predict(self, dataset_key, input_record):
        model = self.get(dataset_key)

        # prebuilt tree, no fallback: O(depth)
        label = classify(model.tree, input_record)
        if label is None:
            # unseen value somewhere on the path: full inference with the training set as fallback
            label = predict(input_record, list(model.records), model.target, self.reserved_columns)
        if label is None:
            raise Unclassifiable(dataset_key)
        return label

    # -------------------------
    # Evaluation / summary
    # -------------------------
    def evaluate(self, dataset_key):
        model = self._models.get(dataset_key)
        if model is None or not model.test_records:
            return None

        actual, predicted = [], []
        confusion = {}
        for record in model.test_records:
            truth = record.get(model.target)
            guess = classify(model.tree, record, model.records, model.target)
            actual.append(truth)
            predicted.append(guess)
            row = confusion.setdefault(truth, {})
            row[guess] = row.get(guess, 0) + 1

        correct = int(metrics.accuracy_score(actual, predicted, normalize=False))
        accuracy = correct / len(predicted) * 100
        return {
            'dataset': dataset_key,
            'total_test_records': len(model.test_records),
            'accuracy': round(accuracy, 2),
            'correct_predictions': correct,
            'confusion_matrix': confusion,
        }

    def attribute_importance(self, dataset_key):
        """Root-level information gain per feature, highest first (stable for ties)."""
        model = self.get(dataset_key)
        ranking = [
            {'attribute': a, 'importance': round(information_gain(model.records, a, model.target), 4)}
            for a in model.attributes
        ]
        return sorted(ranking, key=lambda item: item['importance'], reverse=True)

    def stats(self, dataset_key):
        model = self._models.get(dataset_key)
        if model is None:
            return None

        distribution = frequencies(model.records, model.target)
        return {
            'dataset': dataset_key,
            'target': model.target,
            'total_train_records': len(model.records),
            'total_test_records': len(model.test_records),
            'total_records': len(model.records) + len(model.test_records),
            'label_distribution': distribution,
            'top_label': majority_class(model.records, model.target),
            'attribute_importance': self.attribute_importance(dataset_key),
            'attributes': list(model.attributes),
            'tree_depth': tree_depth(model.tree),
            'leaf_count': count_leaves(model.tree),
        }
