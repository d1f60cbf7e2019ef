# predict.py
"""
Score candidate m6A sites with a pre-trained classifier.

predict_batch is the only code path: predict_single builds a one-row table
and hands it to predict_batch.
"""
import logging
import math
from typing import NamedTuple, Optional

import numpy as np
import pandas as pd

from .errors import ModelError, SchemaError, ThresholdError
from .features import build_features, validate_columns
from .model_io import ClassifierBundle, as_classifier
from .schema import DEFAULT_SCHEMA, FeatureSchema

logger = logging.getLogger(__name__)

PROBABILITY_COLUMN = "predicted_m6a_probability"
STATUS_COLUMN = "predicted_m6a_status"
POSITIVE = "Positive"
NEGATIVE = "Negative"


class SinglePrediction(NamedTuple):
    probability: float
    status: str


def check_threshold(threshold) -> float:
    try:
        thr = float(threshold)
    except (TypeError, ValueError) as e:
        raise ThresholdError(f"threshold must be a number, got {threshold!r}") from e
    if not math.isfinite(thr) or not 0.0 <= thr <= 1.0:
        raise ThresholdError(f"threshold must lie in [0, 1], got {threshold!r}")
    return thr


def classify(probabilities, threshold: float = 0.5) -> np.ndarray:
    """Positive strictly above the threshold; a tie is Negative."""
    p = np.asarray(probabilities, dtype=float)
    return np.where(p > threshold, POSITIVE, NEGATIVE).astype(object)


def _check_probabilities(p: np.ndarray, n_rows: int) -> np.ndarray:
    p = np.asarray(p, dtype=float).reshape(-1)
    if p.shape[0] != n_rows:
        raise ModelError(f"classifier returned {p.shape[0]} probabilities for {n_rows} rows")
    if not np.all((p >= 0.0) & (p <= 1.0)):
        raise ModelError("classifier returned probabilities outside [0, 1]")
    return p


class PredictionPipeline:
    """
    Classifier + feature schema + threshold, validated once and reused.

    Args:
        model     : ClassifierBundle, an object with predict_probability, or a
                    fitted scikit-learn estimator
        schema    : feature layout; defaults to the bundle's own schema
        threshold : default probability cutoff for the Positive call
        strict    : raise CategoryError on unknown categories instead of warning
    """

    def __init__(self, model, schema: Optional[FeatureSchema] = None,
                 threshold: float = 0.5, strict: bool = False):
        if schema is None and isinstance(model, ClassifierBundle):
            schema = model.schema
        self.classifier = as_classifier(model, schema)
        self.schema = (schema or getattr(self.classifier, "schema", None) or DEFAULT_SCHEMA).validate()
        self.threshold = check_threshold(threshold)
        self.strict = strict

        if isinstance(self.classifier, ClassifierBundle):
            if self.classifier.schema != self.schema:
                raise SchemaError(
                    f"schema {self.schema.version} differs from the bundle's schema "
                    f"{self.classifier.schema.version}"
                )
            self.classifier.check_feature_names()
            self.classifier.positive_index()

    def features(self, records: pd.DataFrame) -> pd.DataFrame:
        return build_features(records, self.schema, strict=self.strict)

    def predict_batch(self, records: pd.DataFrame, threshold: Optional[float] = None) -> pd.DataFrame:
        """
        Score every row of `records`.

        Returns a copy of `records` (extra columns kept, same index and order)
        with predicted_m6a_probability and predicted_m6a_status appended.
        """
        thr = self.threshold if threshold is None else check_threshold(threshold)
        # checked before the empty-table shortcut, which never reaches build_features
        validate_columns(records, self.schema)

        out = records.copy()
        if len(records) == 0:
            out[PROBABILITY_COLUMN] = pd.Series(dtype=float)
            out[STATUS_COLUMN] = pd.Series(dtype=object)
            return out

        X = self.features(records)
        try:
            p = self.classifier.predict_probability(X)
        except ModelError:
            raise
        except Exception as e:
            raise ModelError(f"classifier failed on {len(X)} rows: {e}") from e
        p = _check_probabilities(p, len(X))

        out[PROBABILITY_COLUMN] = p
        out[STATUS_COLUMN] = classify(p, thr)
        logger.info("scored %d sites (threshold=%.3f, positive=%d)",
                    len(out), thr, int((out[STATUS_COLUMN] == POSITIVE).sum()))
        return out

    def predict_single(self, gc_content, rna_type, rna_region, exon_length,
                       distance_to_junction, evolutionary_conservation, dna_5mer,
                       threshold: Optional[float] = None) -> SinglePrediction:
        row = pd.DataFrame([{
            "gc_content": gc_content,
            "rna_type": rna_type,
            "rna_region": rna_region,
            "exon_length": exon_length,
            "distance_to_junction": distance_to_junction,
            "evolutionary_conservation": evolutionary_conservation,
            "dna_5mer": dna_5mer,
        }])
        result = self.predict_batch(row, threshold=threshold)
        return SinglePrediction(
            probability=float(result[PROBABILITY_COLUMN].iloc[0]),
            status=str(result[STATUS_COLUMN].iloc[0]),
        )


# ---------- function-style entry points ----------

def predict_batch(model, records: pd.DataFrame, threshold: float = 0.5,
                  strict: bool = False) -> pd.DataFrame:
    return PredictionPipeline(model, threshold=threshold, strict=strict).predict_batch(records)


def predict_single(model, gc_content, rna_type, rna_region, exon_length,
                   distance_to_junction, evolutionary_conservation, dna_5mer,
                   threshold: float = 0.5, strict: bool = False) -> SinglePrediction:
    pipeline = PredictionPipeline(model, threshold=threshold, strict=strict)
    return pipeline.predict_single(gc_content, rna_type, rna_region, exon_length,
                                   distance_to_junction, evolutionary_conservation, dna_5mer)
