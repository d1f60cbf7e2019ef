# schema.py
"""
Training-time feature layout bound to a classifier.

The classifier only sees column names, their order and the category levels,
so all three live here in one immutable object that travels with the model
bundle (see model_io.py) instead of being repeated at every call site.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Tuple

from .encoding import MOTIF_ENCODINGS, NUCLEOTIDES, motif_feature_names
from .errors import SchemaError

CONTEXT_COLUMNS = (
    "gc_content",
    "rna_type",
    "rna_region",
    "exon_length",
    "distance_to_junction",
    "evolutionary_conservation",
)

# level order matters: it is the order the classifier was trained with
RNA_TYPES = ("mRNA", "lincRNA", "lncRNA", "pseudogene")
RNA_REGIONS = ("CDS", "intron", "3'UTR", "5'UTR")

CATEGORICAL_LEVELS = (
    ("rna_type", RNA_TYPES),
    ("rna_region", RNA_REGIONS),
)

MOTIF_COLUMN = "dna_5mer"
MOTIF_LENGTH = 5


@dataclass(frozen=True)
class FeatureSchema:
    version: str = "1.0"
    context_columns: Tuple[str, ...] = CONTEXT_COLUMNS
    categorical_levels: Tuple[Tuple[str, Tuple[str, ...]], ...] = CATEGORICAL_LEVELS
    motif_column: str = MOTIF_COLUMN
    motif_length: int = MOTIF_LENGTH
    alphabet: Tuple[str, ...] = NUCLEOTIDES
    motif_encoding: str = "categorical"
    positive_label: str = "Positive"
    negative_label: str = "Negative"

    @property
    def levels(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self.categorical_levels)

    @property
    def numeric_columns(self) -> Tuple[str, ...]:
        levels = self.levels
        return tuple(c for c in self.context_columns if c not in levels)

    @property
    def required_columns(self) -> Tuple[str, ...]:
        """The input columns a record table must carry, in feature order."""
        return self.context_columns + (self.motif_column,)

    @property
    def motif_columns(self) -> Tuple[str, ...]:
        return tuple(motif_feature_names(self.motif_length, self.alphabet,
                                         one_hot=self.motif_encoding == "onehot"))

    @property
    def feature_columns(self) -> Tuple[str, ...]:
        """Assembled feature vector layout handed to the classifier."""
        return self.context_columns + self.motif_columns

    def validate(self) -> "FeatureSchema":
        """Check internal consistency; returns self so it can be chained."""
        if not self.context_columns:
            raise SchemaError("schema has no context columns")
        if len(set(self.context_columns)) != len(self.context_columns):
            raise SchemaError(f"duplicate context columns: {list(self.context_columns)}")
        if self.motif_column in self.context_columns:
            raise SchemaError(f"motif column {self.motif_column!r} is also a context column")

        seen = set()
        for column, levels in self.categorical_levels:
            if column in seen:
                raise SchemaError(f"levels declared twice for {column!r}")
            seen.add(column)
            if column not in self.context_columns:
                raise SchemaError(f"categorical column {column!r} is not a context column")
            if not levels:
                raise SchemaError(f"no levels declared for {column!r}")
            if len(set(levels)) != len(levels):
                raise SchemaError(f"duplicate levels for {column!r}: {list(levels)}")

        if self.motif_length < 1:
            raise SchemaError(f"motif_length must be positive, got {self.motif_length}")
        if not self.alphabet or len(set(self.alphabet)) != len(self.alphabet):
            raise SchemaError(f"alphabet must be non-empty and unique: {list(self.alphabet)}")
        if any(len(b) != 1 for b in self.alphabet):
            raise SchemaError(f"alphabet entries must be single characters: {list(self.alphabet)}")
        if self.motif_encoding not in MOTIF_ENCODINGS:
            raise SchemaError(
                f"motif_encoding must be one of {MOTIF_ENCODINGS}, got {self.motif_encoding!r}"
            )
        if self.positive_label == self.negative_label:
            raise SchemaError("positive and negative labels must differ")
        return self

    def to_dict(self) -> dict:
        d = asdict(self)
        d["context_columns"] = list(self.context_columns)
        d["categorical_levels"] = {c: list(lv) for c, lv in self.categorical_levels}
        d["alphabet"] = list(self.alphabet)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "FeatureSchema":
        known = set(cls.__dataclass_fields__)
        unknown = set(d) - known
        if unknown:
            raise SchemaError(f"unknown schema fields: {sorted(unknown)}")
        d = dict(d)
        if "context_columns" in d:
            d["context_columns"] = tuple(d["context_columns"])
        if "categorical_levels" in d:
            levels = d["categorical_levels"]
            items = levels.items() if isinstance(levels, dict) else levels
            d["categorical_levels"] = tuple((c, tuple(lv)) for c, lv in items)
        if "alphabet" in d:
            d["alphabet"] = tuple(d["alphabet"])
        if "motif_length" in d:
            d["motif_length"] = int(d["motif_length"])
        return cls(**d).validate()


DEFAULT_SCHEMA = FeatureSchema()
