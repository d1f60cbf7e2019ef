# model_io.py
"""
Classifier bundle: a trained estimator saved together with its feature schema.

On disk a bundle is a joblib dump of a plain dict:

    {"model": estimator,                 # predict_proba + classes_
     "schema": FeatureSchema.to_dict(),
     "feature_dim": int,                 # len(schema.feature_columns)
     "positive_label": str,
     "feature_notes": {...}}
"""
import logging
from pathlib import Path
from typing import Optional, Union

import joblib
import numpy as np
import pandas as pd

from .errors import ModelError, SchemaError
from .schema import DEFAULT_SCHEMA, FeatureSchema

logger = logging.getLogger(__name__)


class ClassifierBundle:
    """Read-only wrapper exposing predict_probability over a fitted estimator."""

    def __init__(self, model, schema: Optional[FeatureSchema] = None, metadata: Optional[dict] = None):
        if not hasattr(model, "predict_proba"):
            raise ModelError(f"{type(model).__name__} has no predict_proba")
        self.model = model
        self.schema = (schema or DEFAULT_SCHEMA).validate()
        self.metadata = dict(metadata or {})

    @property
    def feature_dim(self) -> int:
        return len(self.schema.feature_columns)

    def positive_index(self) -> int:
        classes = list(getattr(self.model, "classes_", []))
        if self.schema.positive_label not in classes:
            raise ModelError(
                f"positive label {self.schema.positive_label!r} not among model classes {classes}"
            )
        return classes.index(self.schema.positive_label)

    def check_feature_names(self):
        """Fail if the estimator was fitted on a different column layout."""
        fitted = getattr(self.model, "feature_names_in_", None)
        if fitted is None:
            return
        expected = list(self.schema.feature_columns)
        if list(fitted) != expected:
            raise SchemaError(
                f"model was fitted on columns {list(fitted)}, schema {self.schema.version} "
                f"declares {expected}"
            )

    def predict_probability(self, features: pd.DataFrame) -> np.ndarray:
        """Probability of the positive class for each feature row."""
        idx = self.positive_index()
        try:
            proba = self.model.predict_proba(features)
        except Exception as e:
            raise ModelError(f"classifier failed on {len(features)} rows: {e}") from e
        proba = np.asarray(proba, dtype=float)
        if proba.ndim != 2 or proba.shape[0] != len(features):
            raise ModelError(
                f"classifier returned shape {proba.shape} for {len(features)} rows"
            )
        return proba[:, idx]

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "schema": self.schema.to_dict(),
            "feature_dim": self.feature_dim,
            "positive_label": self.schema.positive_label,
            "feature_notes": self.metadata,
        }

    def __repr__(self):
        return (f"ClassifierBundle(model={type(self.model).__name__}, "
                f"schema_version={self.schema.version!r}, feature_dim={self.feature_dim})")


def as_classifier(model, schema: Optional[FeatureSchema] = None):
    """
    Accept a ClassifierBundle, anything with predict_probability, or a bare
    scikit-learn style estimator (wrapped with `schema`).
    """
    if isinstance(model, ClassifierBundle):
        return model
    if hasattr(model, "predict_probability"):
        return model
    if hasattr(model, "predict_proba"):
        return ClassifierBundle(model, schema=schema)
    raise ModelError(f"{type(model).__name__} exposes neither predict_probability nor predict_proba")


def save_bundle(bundle: ClassifierBundle, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(bundle.to_dict(), path)
    logger.info("saved classifier bundle -> %s", path)
    return path


def load_bundle(path: Union[str, Path]) -> ClassifierBundle:
    path = Path(path)
    try:
        raw = joblib.load(path)
    except Exception as e:
        raise ModelError(f"could not load classifier bundle {path}: {e}") from e

    if not isinstance(raw, dict) or "model" not in raw or "schema" not in raw:
        raise ModelError(f"{path} is not a classifier bundle (need 'model' and 'schema')")

    try:
        schema = FeatureSchema.from_dict(raw["schema"])
    except SchemaError as e:
        raise ModelError(f"{path} carries an invalid schema: {e}") from e

    feat_dim = raw.get("feature_dim")
    if feat_dim is not None and int(feat_dim) != len(schema.feature_columns):
        raise ModelError(
            f"Feature dim mismatch: bundle={feat_dim}, schema={len(schema.feature_columns)}"
        )
    label = raw.get("positive_label")
    if label is not None and label != schema.positive_label:
        raise ModelError(f"positive label mismatch: bundle={label!r}, schema={schema.positive_label!r}")

    bundle = ClassifierBundle(raw["model"], schema=schema, metadata=raw.get("feature_notes"))
    logger.info("loaded %r from %s", bundle, path)
    return bundle
