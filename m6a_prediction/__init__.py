# m6a_prediction/__init__.py

from .encoding import SequenceEncoder, encode
from .errors import (
    CategoryError,
    M6APredictionError,
    ModelError,
    SchemaError,
    ShapeError,
    ThresholdError,
    UnrecognizedCategoryWarning,
)
from .features import build_features
from .model_io import ClassifierBundle, load_bundle, save_bundle
from .predict import PredictionPipeline, SinglePrediction, predict_batch, predict_single
from .schema import DEFAULT_SCHEMA, FeatureSchema

__version__ = "0.1.0"

__all__ = [
    "SequenceEncoder",
    "encode",
    "build_features",
    "FeatureSchema",
    "DEFAULT_SCHEMA",
    "ClassifierBundle",
    "load_bundle",
    "save_bundle",
    "PredictionPipeline",
    "SinglePrediction",
    "predict_batch",
    "predict_single",
    "M6APredictionError",
    "SchemaError",
    "ShapeError",
    "CategoryError",
    "ModelError",
    "ThresholdError",
    "UnrecognizedCategoryWarning",
]
