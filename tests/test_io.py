import pandas as pd

from m6a_prediction.io import normalize_columns, read_records, write_predictions


def test_read_original_headers(tmp_path):
    path = tmp_path / "m6A_input_example.csv"
    path.write_text(
        "gc_content,RNA_type,RNA_region,exon_length,distance_to_junction,"
        "evolutionary_conservation,DNA_5mer\n"
        "0.45,mRNA,3'UTR,10,8,0.6,GGACA\n"
        "0.30,lncRNA,CDS,120,-15,0.1,TTTAA\n"
    )
    df = read_records(path)
    assert list(df.columns) == [
        "gc_content", "rna_type", "rna_region", "exon_length",
        "distance_to_junction", "evolutionary_conservation", "dna_5mer",
    ]
    assert df["dna_5mer"].tolist() == ["GGACA", "TTTAA"]
    assert df["rna_region"].iloc[0] == "3'UTR"


def test_read_gzipped_tsv(tmp_path, records):
    path = tmp_path / "sites.tsv.gz"
    records.to_csv(path, sep="\t", index=False)
    df = read_records(path)
    pd.testing.assert_frame_equal(df, records.reset_index(drop=True), check_dtype=False)


def test_read_in_chunks(tmp_path, records):
    path = tmp_path / "sites.csv"
    records.to_csv(path, index=False)
    chunks = list(read_records(path, chunksize=10))
    assert [len(c) for c in chunks] == [10, 10, 5]
    assert "dna_5mer" in chunks[0].columns


def test_normalize_leaves_known_names():
    df = pd.DataFrame(columns=["gc_content", "DNA_5mer", "gene_id"])
    assert list(normalize_columns(df).columns) == ["gc_content", "dna_5mer", "gene_id"]


def test_write_predictions_appends(tmp_path):
    path = tmp_path / "out" / "predictions.csv"
    a = pd.DataFrame({"x": [1, 2]})
    write_predictions(a, path)
    write_predictions(a, path, mode="a", header=False)
    assert pd.read_csv(path)["x"].tolist() == [1, 2, 1, 2]
