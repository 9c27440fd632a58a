import pytest

from recordseal.core.types import Digest, Commitment, Verdict, VerdictStatus
from recordseal.core.encoding import hex_encode, hex_decode
from recordseal.core.canon import (
    CANONICAL_FIELDS,
    canonical_json,
    canonical_json_str,
    canonicalize_record,
    project_record,
)
from recordseal.core.hashing import HASH_ALGORITHM, digest_bytes, record_digest
from recordseal.core.errors import InvalidRecord

SCENARIO_A_CANONICAL = (
    b'{"age":34,"category":"TypeA","contactNumber":"5551234567","email":"jane@x.com",'
    b'"externalIdentifier":null,"firstName":"Jane","gender":"F","lastName":"Doe",'
    b'"timestamp":1700000000}'
)
SCENARIO_A_SHA256 = "9d543cc967954d880c29d76325cef70da0dcf6b186997755b4982c886761bff0"


def test_canonical_fields_sorted():
    assert list(CANONICAL_FIELDS) == [
        "age", "category", "contactNumber", "email", "externalIdentifier",
        "firstName", "gender", "lastName", "timestamp",
    ]


def test_canonical_form_pinned(scenario_a):
    assert canonicalize_record(scenario_a) == SCENARIO_A_CANONICAL
    assert record_digest(scenario_a).hex() == SCENARIO_A_SHA256
    assert HASH_ALGORITHM == "sha256"


def test_canonical_ignores_extra_fields_and_order(scenario_a):
    reordered = dict(reversed(list(scenario_a.items())))
    reordered["address"] = "12 Long Street, Springfield"
    reordered["notes"] = "display only"
    reordered["transactionHash"] = "0xabc"

    assert canonicalize_record(reordered) == canonicalize_record(scenario_a)


@pytest.mark.parametrize("field,new_value", [
    ("firstName", "jane"),
    ("lastName", "Doe "),
    ("contactNumber", "5551234568"),
    ("gender", "M"),
    ("category", "TypeB"),
    ("age", 35),
    ("email", "jane@y.com"),
    ("externalIdentifier", "0x1234"),
    ("timestamp", 1700000001),
])
def test_every_canonical_field_is_sensitive(scenario_a, field, new_value):
    changed = dict(scenario_a, **{field: new_value})
    assert canonicalize_record(changed) != canonicalize_record(scenario_a)
    assert record_digest(changed) != record_digest(scenario_a)


def test_absent_field_is_null_not_empty(scenario_a):
    missing = {k: v for k, v in scenario_a.items() if k != "contactNumber"}
    empty = dict(scenario_a, contactNumber="")

    assert b'"contactNumber":null' in canonicalize_record(missing)
    assert record_digest(missing) != record_digest(scenario_a)
    assert record_digest(missing) != record_digest(empty)


def test_explicit_none_equals_absent(scenario_a):
    missing = {k: v for k, v in scenario_a.items() if k != "email"}
    nulled = dict(scenario_a, email=None)
    assert canonicalize_record(missing) == canonicalize_record(nulled)


def test_integers_never_float_text(scenario_a):
    as_float = dict(scenario_a, age=34.0, timestamp=1700000000.0)
    as_text = dict(scenario_a, age="34")

    assert canonicalize_record(as_float) == SCENARIO_A_CANONICAL
    assert canonicalize_record(as_text) == SCENARIO_A_CANONICAL
    assert b"34.0" not in canonicalize_record(as_float)


@pytest.mark.parametrize("field,bad_value", [
    ("age", "thirty-four"),
    ("age", 34.5),
    ("age", True),
    ("age", "-3"),
    ("timestamp", [1700000000]),
    ("firstName", 42),
    ("contactNumber", 5551234567),
    ("email", {"address": "jane@x.com"}),
    ("firstName", "Ja\ud800ne"),
    ("timestamp", 2**53),
    ("timestamp", 2**53 + 1),
    ("age", -(2**53)),
    ("age", 10**400),
    ("age", 1e300),
    ("timestamp", "9" * 5000),
])
def test_malformed_field_raises_invalid_record(scenario_a, field, bad_value):
    with pytest.raises(InvalidRecord) as excinfo:
        canonicalize_record(dict(scenario_a, **{field: bad_value}))
    assert excinfo.value.field == field
    assert field in str(excinfo.value)


def test_non_mapping_record_rejected():
    with pytest.raises(InvalidRecord) as excinfo:
        canonicalize_record([("firstName", "Jane")])
    assert excinfo.value.field is None


def test_strings_kept_verbatim(scenario_a):
    projected = project_record(dict(scenario_a, firstName="  Jane  "))
    assert projected["firstName"] == "  Jane  "


def test_canonicalize_does_not_mutate(scenario_a):
    before = dict(scenario_a)
    canonicalize_record(scenario_a)
    assert scenario_a == before


def test_canonical_json_sorting():
    messy = {"z": 1, "a": "hello", "nested": {"b": 2, "a": 1}}
    assert canonical_json_str(messy) == '{"a":"hello","nested":{"a":1,"b":2},"z":1}'
    assert canonical_json(messy) == canonical_json_str(messy).encode("utf-8")


def test_non_ascii_strings_are_utf8(scenario_a):
    canon = canonicalize_record(dict(scenario_a, lastName="Doé"))
    assert '"lastName":"Doé"'.encode("utf-8") in canon


def test_hex_roundtrip_and_prefix():
    raw = bytes(range(32))
    encoded = hex_encode(raw)
    assert encoded == encoded.lower()
    assert hex_decode(encoded) == raw
    assert hex_decode("0x" + encoded.upper()) == raw
    with pytest.raises(ValueError):
        hex_decode("not-hex")


def test_digest_requires_32_bytes():
    with pytest.raises(ValueError):
        Digest(b"\x00" * 31)
    with pytest.raises(ValueError):
        Digest.from_hex("ab" * 33)
    d = Digest.from_hex("AB" * 32)
    assert d.hex() == "ab" * 32
    assert str(d) == "ab" * 32


def test_digest_bytes_known_vector():
    # sha256 of the empty string
    assert digest_bytes(b"").hex() == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_commitment_immutable():
    c = Commitment("rec-1", Digest(b"\x01" * 32), 1700000000)
    with pytest.raises(AttributeError):
        c.timestamp = 0


def test_verdict_report():
    computed = Digest(b"\x01" * 32)
    committed = Digest(b"\x02" * 32)
    verdict = Verdict(VerdictStatus.MISMATCH, "rec-1", computed, committed, 1700000000)

    assert not verdict
    assert verdict.is_match is False
    assert verdict.to_dict() == {
        "identifier": "rec-1",
        "status": "mismatch",
        "algorithm": "sha256",
        "computed": "01" * 32,
        "committed": "02" * 32,
        "committed_at": 1700000000,
    }
    text = str(verdict)
    assert "alterations detected" in text
    assert "01" * 32 in text and "02" * 32 in text


def test_largest_safe_integers_stay_distinct(scenario_a):
    top = canonicalize_record(dict(scenario_a, timestamp=2**53 - 1))
    below = canonicalize_record(dict(scenario_a, timestamp=2**53 - 2))

    assert b'"timestamp":9007199254740991' in top
    assert top != below
    assert b'"age":-9007199254740991' in canonicalize_record(dict(scenario_a, age=-(2**53 - 1)))


def test_integer_beyond_safe_range_names_field(scenario_a):
    with pytest.raises(InvalidRecord, match="timestamp"):
        canonicalize_record(dict(scenario_a, timestamp=2**53 + 1))


def test_verdict_algorithm_defaults_to_hash_algorithm():
    digest = Digest(b"\x03" * 32)
    verdict = Verdict(VerdictStatus.MATCH, "rec-1", digest, digest, 0)
    assert verdict.algorithm == HASH_ALGORITHM
