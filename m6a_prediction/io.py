# io.py
"""Reading candidate-site tables and writing prediction tables."""
import logging
from pathlib import Path
from typing import Iterator, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

# headers used by the m6APrediction R package example files
COLUMN_ALIASES = {
    "RNA_type": "rna_type",
    "RNA_region": "rna_region",
    "DNA_5mer": "dna_5mer",
    "predicted_m6A_prob": "predicted_m6a_probability",
    "predicted_m6A_status": "predicted_m6a_status",
}


def _sep_for(path: Union[str, Path]) -> str:
    name = str(path).lower()
    if name.endswith(".gz"):
        name = name[:-3]
    return "\t" if name.endswith((".tsv", ".txt")) else ","


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renames = {c: COLUMN_ALIASES[c] for c in df.columns if c in COLUMN_ALIASES}
    if renames:
        logger.debug("renaming columns %s", renames)
        df = df.rename(columns=renames)
    return df


def _read_chunks(reader) -> Iterator[pd.DataFrame]:
    with reader:
        for chunk in reader:
            yield normalize_columns(chunk)


def read_records(path: Union[str, Path], sep: Optional[str] = None,
                 chunksize: Optional[int] = None):
    """
    Read a CSV/TSV (optionally .gz) of candidate sites.

    `dna_5mer` is always read as text so motifs such as "TTTAA" are not
    mangled. With `chunksize` an iterator of DataFrames is returned.
    """
    sep = sep or _sep_for(path)
    dtype = {"dna_5mer": str, "DNA_5mer": str}
    if chunksize:
        reader = pd.read_csv(path, sep=sep, dtype=dtype, chunksize=chunksize)
        return _read_chunks(reader)
    df = pd.read_csv(path, sep=sep, dtype=dtype)
    logger.info("read %d records from %s", len(df), path)
    return normalize_columns(df)


def write_predictions(df: pd.DataFrame, path: Union[str, Path], mode: str = "w",
                      header: bool = True) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, sep=_sep_for(path), mode=mode, header=header)
    return path
