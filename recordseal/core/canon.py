# recordseal/core/canon.py
from typing import Any, Mapping

try:
    import jcs
except ImportError:
    raise ImportError("Please install jcs: pip install jcs")

from recordseal.core.errors import InvalidRecord
from recordseal.core.types import Record

STRING_FIELDS = (
    "firstName",
    "lastName",
    "contactNumber",
    "gender",
    "category",
    "email",
    "externalIdentifier",
)
INTEGER_FIELDS = ("age", "timestamp")

# Sorted by code point, which equals byte order for these ASCII names
CANONICAL_FIELDS = tuple(sorted(STRING_FIELDS + INTEGER_FIELDS))


def canonical_json(obj: Any) -> bytes:
    """
    Produce deterministic UTF-8 bytes according to RFC 8785 (JSON Canonicalization Scheme).
    Returns bytes ready for hashing.
    """
    return jcs.canonicalize(obj)


def canonical_json_str(obj: Any) -> str:
    """Same as above, but returns string (mostly for debugging)."""
    return canonical_json(obj).decode("utf-8")


# JCS writes numbers as IEEE doubles; beyond this, distinct integers share one text
MAX_SAFE_INTEGER = 2**53 - 1


def _as_integer(name: str, value: Any) -> int:
    # bool is an int subclass; True must not hash like 1
    if isinstance(value, bool):
        raise InvalidRecord(name, "expected an integer, got a boolean")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidRecord(name, f"expected an integer, got {value!r}")
        number = int(value)
    elif isinstance(value, str):
        # legacy submissions stored numbers as text
        if not (value and value.isascii() and value.isdigit()):
            raise InvalidRecord(name, f"expected an integer, got {value!r}")
        try:
            number = int(value)
        except ValueError:
            raise InvalidRecord(name, "integer text is too long")
    else:
        raise InvalidRecord(name, f"expected an integer, got {type(value).__name__}")

    if not -MAX_SAFE_INTEGER <= number <= MAX_SAFE_INTEGER:
        raise InvalidRecord(name, f"integer outside ±{MAX_SAFE_INTEGER}")
    return number


def _as_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidRecord(name, f"expected a string, got {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidRecord(name, "not encodable as UTF-8")
    return value


def project_record(record: Record) -> dict:
    """
    Project a record onto exactly the canonical field set, validating each value.
    Absent (or None) fields become None, which serializes as JSON null.
    Strings are kept verbatim: no trimming, no case folding.
    """
    if not isinstance(record, Mapping):
        raise InvalidRecord(None, f"expected a mapping, got {type(record).__name__}")

    projected = {}
    for name in CANONICAL_FIELDS:
        value = record.get(name)
        if value is None:
            projected[name] = None
        elif name in INTEGER_FIELDS:
            projected[name] = _as_integer(name, value)
        else:
            projected[name] = _as_string(name, value)
    return projected


def canonicalize_record(record: Record) -> bytes:
    """Canonical byte form of a record's integrity-relevant fields."""
    return canonical_json(project_record(record))
