"""Data utilities package."""

from .bignumber import (
    BigNumberDecodeError,
    decode_bignumber,
    decode_bignumbers,
    encode_bignumber,
    encode_bignumbers,
    is_bignumber,
)

__all__ = [
    "BigNumberDecodeError",
    "decode_bignumber",
    "decode_bignumbers",
    "encode_bignumber",
    "encode_bignumbers",
    "is_bignumber",
]
