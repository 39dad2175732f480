"""Big integer wire codec.

Payloads produced by the aggregation service serialize large on-chain
integers the way ethers' ``BigNumber`` does::

    {"type": "BigNumber", "hex": "0x0de0b6b3a7640000"}

``decode_bignumbers`` walks a deserialized JSON tree and replaces every such
node with a Python ``int``. ``encode_bignumbers`` is the inverse used when a
snapshot is written back to local storage.
"""

from typing import Any

from vaultwatch.data.exceptions import BigNumberDecodeError

BIGNUMBER_TYPE = "BigNumber"

# Largest integer a JSON consumer can hold in a double without losing bits
MAX_SAFE_INTEGER = 2**53 - 1


def is_bignumber(value: Any) -> bool:
    """Check if a node carries the big integer wire tag."""
    return isinstance(value, dict) and value.get("type") == BIGNUMBER_TYPE


def decode_bignumber(value: dict[str, Any]) -> int:
    """Decode a single tagged node.

    Args:
        value: Tagged node, e.g. ``{"type": "BigNumber", "hex": "-0x01"}``.

    Returns:
        The integer value.

    Raises:
        BigNumberDecodeError: If the hex payload is missing or malformed.
    """
    raw = value.get("hex", value.get("_hex"))
    if not isinstance(raw, str):
        raise BigNumberDecodeError(f"BigNumber without hex payload: {value!r}")

    text = raw.strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    if not text.lower().startswith("0x") or len(text) == 2:
        raise BigNumberDecodeError(f"Invalid BigNumber hex: {raw!r}")

    try:
        number = int(text[2:], 16)
    except ValueError as e:
        raise BigNumberDecodeError(f"Invalid BigNumber hex: {raw!r}") from e
    return -number if negative else number


def decode_bignumbers(tree: Any) -> Any:
    """Replace every tagged node of a JSON tree with an ``int``.

    Non-tagged nodes pass through unchanged. ``None`` and scalar leaves are
    returned as-is. Containers are rebuilt, so the input tree is not mutated.
    """
    if is_bignumber(tree):
        return decode_bignumber(tree)
    if isinstance(tree, dict):
        return {key: decode_bignumbers(value) for key, value in tree.items()}
    if isinstance(tree, list):
        return [decode_bignumbers(item) for item in tree]
    return tree


def encode_bignumber(value: int) -> dict[str, str]:
    """Encode an integer into the wire tag."""
    sign = "-" if value < 0 else ""
    return {"type": BIGNUMBER_TYPE, "hex": f"{sign}{hex(abs(value))}"}


def encode_bignumbers(tree: Any, max_plain: int = MAX_SAFE_INTEGER) -> Any:
    """Tag every integer whose magnitude exceeds ``max_plain``.

    Smaller integers and ``bool`` values are left as plain JSON numbers.
    """
    if isinstance(tree, bool):
        return tree
    if isinstance(tree, int):
        return encode_bignumber(tree) if abs(tree) > max_plain else tree
    if isinstance(tree, dict):
        return {key: encode_bignumbers(value, max_plain) for key, value in tree.items()}
    if isinstance(tree, (list, tuple)):
        return [encode_bignumbers(item, max_plain) for item in tree]
    return tree
