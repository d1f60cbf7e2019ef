import numpy as np
import pandas as pd
import pytest
from sklearn.ensemble import HistGradientBoostingClassifier

from m6a_prediction.features import build_features
from m6a_prediction.model_io import ClassifierBundle
from m6a_prediction.schema import DEFAULT_SCHEMA, RNA_REGIONS, RNA_TYPES


def make_records(n=240, seed=0):
    rng = np.random.default_rng(seed)
    bases = np.array(list("ATCG"))
    motifs = ["".join(rng.choice(bases, size=5)) for _ in range(n)]
    # DRACH-like core (xxACx) drives the label, plus context
    df = pd.DataFrame({
        "gc_content": rng.uniform(0, 1, n).round(3),
        "rna_type": rng.choice(RNA_TYPES, n),
        "rna_region": rng.choice(RNA_REGIONS, n),
        "exon_length": rng.integers(1, 3000, n),
        "distance_to_junction": rng.integers(-500, 500, n),
        "evolutionary_conservation": rng.uniform(0, 1, n).round(3),
        "dna_5mer": motifs,
    })
    score = (
        (df["dna_5mer"].str[2:4] == "AC").astype(float) * 1.5
        + (df["rna_region"] == "3'UTR").astype(float)
        + df["evolutionary_conservation"]
        + rng.normal(0, 0.3, n)
    )
    labels = np.where(score > 1.2, "Positive", "Negative")
    return df, labels


@pytest.fixture(scope="session")
def training_data():
    return make_records()


@pytest.fixture(scope="session")
def fitted_model(training_data):
    records, labels = training_data
    X = build_features(records, DEFAULT_SCHEMA)
    model = HistGradientBoostingClassifier(
        categorical_features="from_dtype",
        max_iter=30,
        early_stopping=False,
        random_state=42,
    )
    model.fit(X, labels)
    return model


@pytest.fixture(scope="session")
def bundle(fitted_model):
    return ClassifierBundle(fitted_model, schema=DEFAULT_SCHEMA,
                            metadata={"trained_on": "synthetic"})


@pytest.fixture
def records(training_data):
    return training_data[0].head(25).copy()


@pytest.fixture
def example_row():
    return {
        "gc_content": 0.45,
        "rna_type": "mRNA",
        "rna_region": "3'UTR",
        "exon_length": 10,
        "distance_to_junction": 8,
        "evolutionary_conservation": 0.6,
        "dna_5mer": "GGACA",
    }


class FixedProbability:
    """Classifier stand-in returning preset probabilities."""

    def __init__(self, probabilities):
        self.probabilities = np.asarray(probabilities, dtype=float)
        self.calls = 0
        self.last_features = None

    def predict_probability(self, features):
        self.calls += 1
        self.last_features = features
        return self.probabilities[: len(features)]


@pytest.fixture
def fixed_probability():
    return FixedProbability
