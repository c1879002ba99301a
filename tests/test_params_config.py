from __future__ import annotations

from pathlib import Path

import pytest

from pqdigest import params
from pqdigest.config import DEFAULT_BACKEND, load_settings
from pqdigest.errors import UnsupportedParameterSet


def test_ml_dsa_65_sizes():
    p = params.get_parameter_set("ML-DSA-65")
    assert (p.seed_len, p.public_key_len, p.secret_key_len, p.signature_len) == (32, 1952, 4032, 3309)
    assert p.digest_len == 32
    assert p.to_dict()["label"] == "ML-DSA-65"


def test_parameter_set_aliases_resolve_to_same_record():
    assert params.get_parameter_set("ml-dsa-65") is params.get_parameter_set("ML_DSA_65")


@pytest.mark.parametrize("label", ["ML-DSA-44", "ML-DSA-87", "", "SLH-DSA-SHA2-128s"])
def test_other_parameter_sets_unsupported(label):
    with pytest.raises(UnsupportedParameterSet):
        params.get_parameter_set(label)


def test_settings_defaults():
    s = load_settings({})
    assert s.backend == DEFAULT_BACKEND
    assert s.jobs == 1
    assert s.vector_dir is None
    assert s.vector_file("keyGen.json") is None


def test_settings_from_environment(tmp_path: Path):
    s = load_settings({
        "PQDIGEST_BACKEND": "liboqs",
        "PQDIGEST_JOBS": "4",
        "PQDIGEST_VECTOR_DIR": str(tmp_path),
    })
    assert s.backend == "liboqs"
    assert s.jobs == 4
    assert s.vector_file("sigVer.json") == tmp_path / "sigVer.json"


@pytest.mark.parametrize("raw", ["zero", "0", "-3", " "])
def test_settings_bad_jobs_fall_back_to_one(raw):
    assert load_settings({"PQDIGEST_JOBS": raw}).jobs == 1


def test_settings_read_process_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PQDIGEST_JOBS", "3")
    monkeypatch.delenv("PQDIGEST_BACKEND", raising=False)
    s = load_settings()
    assert s.jobs == 3
    assert s.backend == DEFAULT_BACKEND
