from __future__ import annotations

import json

import pytest

from pqdigest.errors import VectorFormatError
from pqdigest.vectors import (
    applicable_keygen_groups,
    applicable_sigver_groups,
    load_sigver_vectors,
    parse_keygen_groups,
    parse_sigver_groups,
    read_vector_file,
)


def _sigver_group(**overrides):
    group = {
        "tgId": 7,
        "parameterSet": "ML-DSA-65",
        "signatureInterface": "external",
        "preHash": "pure",
        "tests": [
            {"tcId": 1, "testPassed": True, "pk": "01" * 4, "message": "AB", "context": "", "signature": "02" * 4},
        ],
    }
    group.update(overrides)
    return group


def _keygen_group(**overrides):
    group = {
        "tgId": 1,
        "parameterSet": "ML-DSA-65",
        "tests": [{"tcId": 1, "seed": "00" * 32, "pk": "AA", "sk": "BB"}],
    }
    group.update(overrides)
    return group


@pytest.mark.parametrize("layout", ["object", "envelope", "bare"])
def test_accepted_layouts(layout):
    group = _sigver_group()
    data = {
        "object": {"vsId": 1, "testGroups": [group]},
        "envelope": [{"acvVersion": "1.0"}, {"vsId": 1, "testGroups": [group]}],
        "bare": [group],
    }[layout]
    groups = parse_sigver_groups(data)
    assert len(groups) == 1
    case = groups[0].cases[0]
    assert groups[0].tg_id == 7
    assert case.pk == b"\x01" * 4
    assert case.message == b"\xab"
    assert case.context == b""
    assert case.signature == b"\x02" * 4
    assert case.expected_passed is True


@pytest.mark.parametrize("data", [{"vsId": 1}, "text", {"testGroups": "nope"}, [1, 2]])
def test_missing_test_groups(data):
    with pytest.raises(VectorFormatError, match="testGroups"):
        parse_sigver_groups(data)


def test_read_vector_file_errors(tmp_path):
    with pytest.raises(VectorFormatError, match="failed to read"):
        read_vector_file(tmp_path / "absent.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(VectorFormatError, match="invalid JSON"):
        read_vector_file(bad)


def test_load_from_file(tmp_path):
    path = tmp_path / "sigVer.json"
    path.write_text(json.dumps({"testGroups": [_sigver_group()]}), encoding="utf-8")
    groups = load_sigver_vectors(path)
    assert groups[0].cases[0].tc_id == 1


def test_missing_signature_field():
    group = _sigver_group(tests=[{"tcId": 3, "testPassed": False, "pk": "00"}])
    with pytest.raises(VectorFormatError, match="tcId=3: missing field 'signature'"):
        parse_sigver_groups([group])


def test_bad_hex_is_vector_error():
    group = _sigver_group(tests=[{"tcId": 4, "testPassed": False, "pk": "zz", "signature": "00"}])
    with pytest.raises(VectorFormatError, match="bad pk hex"):
        parse_sigver_groups([group])


def test_test_passed_must_be_boolean():
    group = _sigver_group(tests=[{"tcId": 5, "testPassed": "true", "pk": "00", "signature": "00"}])
    with pytest.raises(VectorFormatError, match="testPassed must be a boolean"):
        parse_sigver_groups([group])


def test_group_level_public_key_and_defaults():
    group = _sigver_group(pk="0A0B", tests=[{"tcId": 6, "testPassed": False, "signature": "00", "reason": "bad"}])
    case = parse_sigver_groups([group])[0].cases[0]
    assert case.pk == b"\x0a\x0b"
    assert case.message == b""
    assert case.context == b""
    assert case.reason == "bad"


def test_wrong_lengths_are_kept_for_negative_cases():
    group = _sigver_group(tests=[{"tcId": 8, "testPassed": False, "pk": "00" * 1953, "signature": "00" * 3308}])
    case = parse_sigver_groups([group])[0].cases[0]
    assert len(case.pk) == 1953
    assert len(case.signature) == 3308


def test_keygen_seed_length_checked():
    group = _keygen_group(tests=[{"tcId": 2, "seed": "00" * 31, "pk": "AA", "sk": "BB"}])
    with pytest.raises(VectorFormatError, match="seed must be 32 bytes"):
        parse_keygen_groups([group])


def test_keygen_parses_expected_values():
    case = parse_keygen_groups({"testGroups": [_keygen_group()]})[0].cases[0]
    assert case.seed == bytes(32)
    assert case.expected_pk == b"\xaa"
    assert case.expected_sk == b"\xbb"


def test_group_filters():
    sigver = parse_sigver_groups([
        _sigver_group(tgId=1),
        _sigver_group(tgId=2, signatureInterface="internal"),
        _sigver_group(tgId=3, preHash="preHash"),
        _sigver_group(tgId=4, parameterSet="ML-DSA-44"),
    ])
    assert [g.tg_id for g in applicable_sigver_groups(sigver)] == [1]

    keygen = parse_keygen_groups([_keygen_group(tgId=1), _keygen_group(tgId=2, parameterSet="ML-DSA-87")])
    assert [g.tg_id for g in applicable_keygen_groups(keygen)] == [1]
    assert [g.tg_id for g in applicable_keygen_groups(keygen, "ML-DSA-87")] == [2]
