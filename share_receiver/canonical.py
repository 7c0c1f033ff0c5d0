"""
Canonical form and content hashing for share payloads.

Two payloads holding the same values must hash identically regardless of the
order their keys were declared in, so every mapping is rebuilt with sorted
keys before it is serialised. Signing clients hash the output of JavaScript's
``JSON.stringify``, so the serialiser reproduces its text byte for byte.
"""
import json
import math
import re
from decimal import Decimal
from typing import Any, Dict, List

from web3 import Web3

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def _utf16_sort_key(key: Any) -> bytes:
    # big-endian UTF-16 bytes order like JavaScript string comparison
    return str(key).encode("utf-16-be", "surrogatepass")


def canonicalize(value: Any) -> Any:
    """
    Recursively sort mapping keys, keeping sequence order.

    Keys are ordered by UTF-16 code unit, as JavaScript compares strings.

    Args:
        value: Any JSON-like tree (mappings, lists/tuples, scalars)

    Returns:
        A new tree whose mappings have keys in ascending lexical order
    """
    if isinstance(value, dict):
        return {key: canonicalize(value[key]) for key in sorted(value, key=_utf16_sort_key)}
    if isinstance(value, (list, tuple)):
        return [canonicalize(item) for item in value]
    return value


def _encode_number(value: float) -> str:
    """Render a float with the ECMAScript Number::toString rules"""
    if not math.isfinite(value):
        return "null"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr gives the shortest round-tripping digits, as ECMAScript does
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = k + exponent

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _encode_string(value: str) -> str:
    encoded = json.dumps(value, ensure_ascii=False)
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", encoded)


def canonical_json(value: Any) -> str:
    """
    Serialise a tree the way JSON.stringify does: compact separators, mapping
    insertion order kept, non-ASCII characters left unescaped, lone
    surrogates escaped and numbers in JavaScript notation.

    Raises:
        TypeError: If the tree holds a value JSON cannot represent
    """
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return _encode_string(value)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return _encode_number(value)
    if isinstance(value, dict):
        members = (
            f"{_encode_string(key if isinstance(key, str) else canonical_json(key))}:{canonical_json(item)}"
            for key, item in value.items()
        )
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(canonical_json(item) for item in value) + "]"
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def keccak_hex(payload: str) -> str:
    """Return the 0x-prefixed keccak-256 of a UTF-8 string"""
    return Web3.to_hex(Web3.keccak(text=payload))


def content_hash(data: List[Dict[str, Any]], token: str) -> str:
    """
    Compute the packed-data hash of a share payload.

    The encoded object always holds ``data`` first and ``token`` second.

    Args:
        data: Canonicalized data records
        token: Submitted token

    Returns:
        "0x" + keccak256(json({data, token}))
    """
    return keccak_hex(canonical_json({"data": data, "token": token}))
