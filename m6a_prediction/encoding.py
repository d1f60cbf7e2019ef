# encoding.py
"""
Positional encoding of k-mer motifs.

Each base becomes its own categorical field (position_1 .. position_L) whose
categories are the full alphabet, so a base that never shows up in a batch is
still a declared level. There is no joint k-mer encoding.
"""
import numpy as np
import pandas as pd

from .errors import ShapeError

NUCLEOTIDES = ("A", "T", "C", "G")
MOTIF_ENCODINGS = ("categorical", "onehot")

# ---------- helpers ----------

def _clean_motif(m):
    # RNA motifs are read as DNA
    if not isinstance(m, str):
        return None
    return m.strip().upper().replace("U", "T")


def _as_series(motifs) -> pd.Series:
    if isinstance(motifs, str):
        raise TypeError("expected a sequence of motifs, got a single string")
    if isinstance(motifs, pd.Series):
        return motifs
    return pd.Series(list(motifs), dtype=object)


def _preview(rows, limit=10):
    shown = ", ".join(str(r) for r in rows[:limit])
    return shown + (", ..." if len(rows) > limit else "")


def motif_feature_names(length: int, alphabet=NUCLEOTIDES, one_hot: bool = False):
    if one_hot:
        return [f"position_{i}_{b}" for i in range(1, length + 1) for b in alphabet]
    return [f"position_{i}" for i in range(1, length + 1)]


def prepare_motifs(motifs, length=None):
    """
    Normalise motifs and check they all share one width.

    The width is `length` when given, otherwise the first motif's length.
    Every row is checked against it explicitly.

    Returns:
      cleaned : pd.Series of upper-case DNA strings (input index kept)
      width   : int
    """
    s = _as_series(motifs)
    cleaned = s.map(_clean_motif)

    missing = cleaned.index[cleaned.isna()].tolist()
    if missing:
        raise ShapeError(
            f"motif missing or not a string at rows [{_preview(missing)}]", rows=missing
        )

    if length is None:
        if len(cleaned) == 0:
            raise ShapeError("cannot infer motif length from an empty batch")
        length = len(cleaned.iloc[0])
    length = int(length)

    bad = cleaned.index[cleaned.map(len) != length].tolist()
    if bad:
        raise ShapeError(
            f"all motifs must have length {length}; rows [{_preview(bad)}] differ",
            rows=bad,
        )
    return cleaned, length


def unrecognized_bases(motifs, alphabet=NUCLEOTIDES):
    """Distinct characters (after normalisation) that are not in the alphabet."""
    allowed = set(alphabet)
    found = set()
    for m in _as_series(motifs).map(_clean_motif):
        if m is not None:
            found.update(ch for ch in m if ch not in allowed)
    return sorted(found)


def _split(cleaned: pd.Series, width: int) -> np.ndarray:
    if len(cleaned) == 0:
        return np.empty((0, width), dtype="<U1")
    return np.array([list(m) for m in cleaned.tolist()], dtype="<U1").reshape(len(cleaned), width)

# ---------- encoders ----------

def encode_categorical(motifs, length=None, alphabet=NUCLEOTIDES) -> pd.DataFrame:
    cleaned, width = prepare_motifs(motifs, length)
    chars = _split(cleaned, width)
    names = motif_feature_names(width, alphabet)
    cats = list(alphabet)
    # bases outside the alphabet are masked to missing before building each Categorical
    known = np.isin(chars, cats)
    masked = np.where(known, chars.astype(object), None)
    return pd.DataFrame(
        {name: pd.Categorical(masked[:, i], categories=cats) for i, name in enumerate(names)},
        index=cleaned.index,
    )


def encode_onehot(motifs, length=None, alphabet=NUCLEOTIDES) -> pd.DataFrame:
    cleaned, width = prepare_motifs(motifs, length)
    chars = _split(cleaned, width)                              # (N, L)
    bases = np.array(alphabet, dtype="<U1")
    hot = (chars[:, :, None] == bases[None, None, :])           # (N, L, |alphabet|)
    arr = hot.astype(np.uint8).reshape(len(cleaned), width * len(alphabet))
    return pd.DataFrame(arr, columns=motif_feature_names(width, alphabet, one_hot=True),
                        index=cleaned.index)


def encode(motifs, length=None, alphabet=NUCLEOTIDES, one_hot=False) -> pd.DataFrame:
    """
    Encode motifs position by position.

    Args:
        motifs   : sequence (list / Series) of motif strings
        length   : expected motif width; inferred from the first motif if None
        alphabet : ordered category levels for every position
        one_hot  : return 0/1 indicator columns instead of categoricals

    Raises ShapeError when motifs differ in length or are missing.
    Bases outside the alphabet become NaN (categorical) or all-zero (one-hot).
    """
    if one_hot:
        return encode_onehot(motifs, length=length, alphabet=alphabet)
    return encode_categorical(motifs, length=length, alphabet=alphabet)


class SequenceEncoder:
    """Encoder with the width and alphabet fixed up front."""

    def __init__(self, length=None, alphabet=NUCLEOTIDES, one_hot=False):
        self.length = length
        self.alphabet = tuple(alphabet)
        self.one_hot = one_hot

    def encode(self, motifs) -> pd.DataFrame:
        return encode(motifs, length=self.length, alphabet=self.alphabet, one_hot=self.one_hot)

    def feature_names(self, length=None):
        length = length or self.length
        if length is None:
            raise ShapeError("encoder has no fixed motif length")
        return motif_feature_names(length, self.alphabet, one_hot=self.one_hot)

    def __repr__(self):
        return (f"SequenceEncoder(length={self.length}, alphabet={self.alphabet}, "
                f"one_hot={self.one_hot})")
