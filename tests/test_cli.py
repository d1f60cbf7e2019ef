import pandas as pd
import pytest

from m6a_prediction.cli import main
from m6a_prediction.model_io import save_bundle


@pytest.fixture
def bundle_path(tmp_path, bundle):
    return str(save_bundle(bundle, tmp_path / "bundle.joblib"))


def test_batch_mode(tmp_path, bundle_path, records):
    inp = tmp_path / "sites.csv"
    out = tmp_path / "predictions.csv"
    records.to_csv(inp, index=False)

    assert main(["--model", bundle_path, "--input", str(inp), "--output", str(out)]) == 0

    df = pd.read_csv(out)
    assert len(df) == len(records)
    assert set(df["predicted_m6a_status"]) <= {"Positive", "Negative"}


def test_chunked_batch_mode(tmp_path, bundle_path, records):
    inp = tmp_path / "sites.csv"
    out = tmp_path / "predictions.csv"
    records.to_csv(inp, index=False)

    argv = ["--model", bundle_path, "--input", str(inp), "--output", str(out), "--chunksize", "7"]
    assert main(argv) == 0

    chunked = pd.read_csv(out)
    assert len(chunked) == len(records)
    assert chunked["dna_5mer"].tolist() == records["dna_5mer"].tolist()


def test_single_site(bundle_path, capsys):
    argv = [
        "--model", bundle_path,
        "--gc_content", "0.45", "--rna_type", "mRNA", "--rna_region", "3'UTR",
        "--exon_length", "10", "--distance_to_junction", "8",
        "--evolutionary_conservation", "0.6", "--dna_5mer", "GGACA",
    ]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "predicted_m6a_probability=" in out
    assert "predicted_m6a_status=" in out


def test_incomplete_single_site(bundle_path):
    with pytest.raises(SystemExit):
        main(["--model", bundle_path, "--gc_content", "0.45"])


def test_errors_exit_with_status_2(tmp_path, bundle_path, records, capsys):
    inp = tmp_path / "sites.csv"
    records.drop(columns="dna_5mer").to_csv(inp, index=False)
    assert main(["--model", bundle_path, "--input", str(inp),
                 "--output", str(tmp_path / "o.csv")]) == 2
    assert "SchemaError" in capsys.readouterr().err


def test_bad_threshold(tmp_path, bundle_path, records):
    inp = tmp_path / "sites.csv"
    records.to_csv(inp, index=False)
    assert main(["--model", bundle_path, "--input", str(inp), "--threshold", "1.1"]) == 2


def test_failing_last_chunk_leaves_no_output(tmp_path, bundle_path, records):
    inp = tmp_path / "sites.csv"
    out = tmp_path / "predictions.csv"
    records = records.copy()
    records.loc[records.index[-1], "dna_5mer"] = "ATGC"
    records.to_csv(inp, index=False)

    argv = ["--model", bundle_path, "--input", str(inp), "--output", str(out), "--chunksize", "7"]
    assert main(argv) == 2
    assert not out.exists()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["bundle.joblib", "sites.csv"]


def test_failed_run_keeps_previous_output(tmp_path, bundle_path, records):
    inp = tmp_path / "sites.csv"
    out = tmp_path / "predictions.csv"
    out.write_text("previous\n")
    records.drop(columns="gc_content").to_csv(inp, index=False)

    assert main(["--model", bundle_path, "--input", str(inp), "--output", str(out)]) == 2
    assert out.read_text() == "previous\n"


def test_missing_input_file(tmp_path, bundle_path, capsys):
    argv = ["--model", bundle_path, "--input", str(tmp_path / "nope.csv"),
            "--output", str(tmp_path / "o.csv")]
    assert main(argv) == 2
    assert "FileNotFoundError" in capsys.readouterr().err
    assert not (tmp_path / "o.csv").exists()
