# cli.py
# Batch:  m6a-predict --model rf_bundle.joblib --input m6A_input.csv --output predictions.csv
# Single: m6a-predict --model rf_bundle.joblib --gc_content 0.45 --rna_type mRNA --rna_region "3'UTR" \
#           --exon_length 10 --distance_to_junction 8 --evolutionary_conservation 0.6 --dna_5mer GGACA
import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path

from tqdm import tqdm

from .errors import M6APredictionError
from .io import read_records, write_predictions
from .logger import setup_logger
from .model_io import load_bundle
from .predict import PredictionPipeline

SITE_ARGS = (
    ("gc_content", float),
    ("rna_type", str),
    ("rna_region", str),
    ("exon_length", float),
    ("distance_to_junction", float),
    ("evolutionary_conservation", float),
    ("dna_5mer", str),
)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Predict m6A modification sites")
    ap.add_argument("--model", required=True, help="Classifier bundle (.joblib)")
    ap.add_argument("--input", help="CSV/TSV (optionally .gz) of candidate sites")
    ap.add_argument("--output", default="predictions.csv", help="Output CSV file")
    ap.add_argument("--threshold", type=float, default=0.5,
                    help="Positive if probability > threshold")
    ap.add_argument("--strict", action="store_true",
                    help="Fail on unknown RNA type/region or motif bases instead of warning")
    ap.add_argument("--chunksize", type=int, default=None,
                    help="Score the input in chunks of this many rows")
    ap.add_argument("--log_level", default="INFO")
    ap.add_argument("--log_file", default=None)

    site = ap.add_argument_group("single site (used when --input is not given)")
    for name, typ in SITE_ARGS:
        site.add_argument(f"--{name}", type=typ)
    return ap


def _score_into(pipeline: PredictionPipeline, args, path) -> int:
    if not args.chunksize:
        out = pipeline.predict_batch(read_records(args.input))
        write_predictions(out, path)
        return len(out)

    n, first = 0, True
    for chunk in tqdm(read_records(args.input, chunksize=args.chunksize), unit="chunks", desc="predict"):
        out = pipeline.predict_batch(chunk)
        write_predictions(out, path, mode="w" if first else "a", header=first)
        first = False
        n += len(out)
    if first:
        # header-only input yields no chunks
        write_predictions(pipeline.predict_batch(read_records(args.input)), path)
    return n


def _run_batch(pipeline: PredictionPipeline, args) -> int:
    """Score into a temp file beside --output; it replaces --output only if every row scored."""
    target = Path(args.output)
    target.parent.mkdir(parents=True, exist_ok=True)
    # keep the full suffix so separator and compression are inferred as for the target
    fd, tmp = tempfile.mkstemp(prefix=f".{target.name}.", suffix="".join(target.suffixes),
                               dir=target.parent)
    os.close(fd)
    try:
        n = _score_into(pipeline, args, tmp)
        os.replace(tmp, target)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)
    return n


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    setup_logger("m6a_prediction", level=getattr(logging, args.log_level.upper(), logging.INFO),
                 log_file=args.log_file)

    site_values = [getattr(args, name) for name, _ in SITE_ARGS]
    if args.input is None and any(v is None for v in site_values):
        missing = [f"--{name}" for (name, _), v in zip(SITE_ARGS, site_values) if v is None]
        ap.error(f"give --input, or all single-site arguments (missing: {' '.join(missing)})")

    try:
        bundle = load_bundle(args.model)
        pipeline = PredictionPipeline(bundle, threshold=args.threshold, strict=args.strict)
        if args.input is not None:
            n = _run_batch(pipeline, args)
            print(f"[done] Wrote {n} predictions -> {args.output}")
        else:
            res = pipeline.predict_single(*site_values)
            print(f"predicted_m6a_probability={res.probability:.4f}")
            print(f"predicted_m6a_status={res.status}")
    except (M6APredictionError, OSError) as e:
        print(f"[error] {type(e).__name__}: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
