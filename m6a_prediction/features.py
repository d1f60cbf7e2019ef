# features.py
"""
Assemble the classifier feature table from raw candidate-site records.

Steps: required columns -> numeric coercion -> checked category recoding ->
positional motif encoding -> columns in the schema's feature order.
"""
import logging
import sys
import warnings
from typing import List, NamedTuple

import pandas as pd

from .encoding import encode, unrecognized_bases
from .errors import CategoryError, SchemaError, UnrecognizedCategoryWarning
from .schema import DEFAULT_SCHEMA, FeatureSchema

logger = logging.getLogger(__name__)

MISSING_LABEL = "<NA>"


class CategoryCheck(NamedTuple):
    """Recoded column plus the distinct values that fell outside the levels."""
    values: pd.Categorical
    unrecognized: List[str]

    @property
    def ok(self) -> bool:
        return not self.unrecognized


def validate_columns(records: pd.DataFrame, schema: FeatureSchema = DEFAULT_SCHEMA):
    missing = [c for c in schema.required_columns if c not in records.columns]
    if missing:
        raise SchemaError(f"missing required columns: {', '.join(missing)}", missing=missing)


def check_categories(values, levels) -> CategoryCheck:
    s = pd.Series(values, dtype=object)
    known = s.isin(list(levels))
    # unknowns are masked before building the Categorical; missing values count as unknown
    cat = pd.Categorical(s.where(known), categories=list(levels))
    bad = s[~known]
    unrecognized = sorted({MISSING_LABEL if pd.isna(v) else str(v) for v in bad.tolist()})
    return CategoryCheck(cat, unrecognized)


def _caller_stacklevel() -> int:
    """Stack level of the first frame outside this package, seen from _degrade."""
    frame = sys._getframe(1)
    level = 1
    while frame is not None and frame.f_globals.get("__name__", "").startswith(__package__ + "."):
        frame = frame.f_back
        level += 1
    return level


def _degrade(column, unrecognized, levels, strict):
    msg = (f"column {column!r} has values outside {list(levels)}: {unrecognized}")
    if strict:
        raise CategoryError(msg, column=column, values=unrecognized)
    warnings.warn(msg + "; affected rows are scored with a missing category",
                  UnrecognizedCategoryWarning, stacklevel=_caller_stacklevel())


def _numeric(records: pd.DataFrame, column: str) -> pd.Series:
    try:
        return pd.to_numeric(records[column], errors="raise")
    except (TypeError, ValueError) as e:
        raise SchemaError(f"column {column!r} must be numeric: {e}") from e


def build_features(records: pd.DataFrame, schema: FeatureSchema = DEFAULT_SCHEMA,
                   strict: bool = False) -> pd.DataFrame:
    """
    Build the feature table for `records` in `schema.feature_columns` order.

    Unknown categories (including unknown motif bases) warn and become a
    missing level, or raise CategoryError when strict=True.
    Row index and order are kept.
    """
    validate_columns(records, schema)
    levels = schema.levels

    cols = {}
    for column in schema.context_columns:
        if column in levels:
            check = check_categories(records[column].to_numpy(), levels[column])
            if not check.ok:
                _degrade(column, check.unrecognized, levels[column], strict)
            cols[column] = check.values
        else:
            cols[column] = _numeric(records, column).to_numpy()
    context = pd.DataFrame(cols, index=records.index)

    motifs = records[schema.motif_column]
    motif = encode(motifs, length=schema.motif_length, alphabet=schema.alphabet,
                   one_hot=schema.motif_encoding == "onehot")
    odd = unrecognized_bases(motifs, schema.alphabet)
    if odd:
        _degrade(schema.motif_column, odd, schema.alphabet, strict)

    # positional join; record tables may carry a non-unique index
    features = pd.concat([context.reset_index(drop=True), motif.reset_index(drop=True)], axis=1)
    features.index = records.index
    logger.debug("built %d feature rows x %d columns (schema %s)",
                 len(features), features.shape[1], schema.version)
    return features[list(schema.feature_columns)]
