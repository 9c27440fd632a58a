# recordseal/core/encoding.py
import binascii


def hex_encode(data: bytes) -> str:
    """Encode bytes to lowercase hex (no prefix)."""
    return binascii.hexlify(data).decode("ascii")


def hex_decode(s: str) -> bytes:
    """Decode hex string back to bytes. Accepts an optional 0x prefix and either case."""
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    try:
        return binascii.unhexlify(s)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Not a valid hex string: {s!r}") from e
