#!/usr/bin/env python3
"""
Utility Functions
Hex quantity and data helpers shared by the RPC layer and the data models
"""

from typing import Union

from .exceptions import ValidationError

BLOCK_TAGS = ("latest", "earliest", "pending", "safe", "finalized")


def parse_quantity(value: str) -> int:
    """Decode a JSON-RPC hex quantity such as "0x1b4" into an int"""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise ValueError(f"not a hex quantity: {value!r}")
    return int(value, 16)


def parse_data(value: str, size: int = None) -> bytes:
    """Decode a JSON-RPC hex data string, left-padding to size bytes if given"""
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise ValueError(f"not hex data: {value!r}")
    raw = value[2:]
    if len(raw) % 2:
        raw = "0" + raw
    data = bytes.fromhex(raw)
    if size is not None:
        if len(data) > size:
            raise ValueError(f"hex data longer than {size} bytes: {value!r}")
        data = data.rjust(size, b"\x00")
    return data


def to_block_param(block: Union[int, str]) -> str:
    """Render a block number or tag as an eth_getBlockByNumber parameter"""
    if isinstance(block, str):
        if block not in BLOCK_TAGS:
            raise ValidationError(f"Unknown block tag: {block}")
        return block
    if isinstance(block, bool) or not isinstance(block, int) or block < 0:
        raise ValidationError(f"Block number must be a non-negative integer, got {block!r}")
    return hex(block)


def parse_ttd(value: Union[int, str]) -> int:
    """
    Parse a terminal total difficulty.

    Accepts an int, a decimal string or a 0x-prefixed hex string. The result
    must be non-negative.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid TTD: {value!r}")
    if isinstance(value, int):
        ttd = value
    elif isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            if text.startswith(("0x", "0X")):
                ttd = int(text, 16)
            else:
                ttd = int(text, 10)
        except ValueError:
            raise ValidationError(f"Invalid TTD: {value!r}")
    else:
        raise ValidationError(f"Invalid TTD: {value!r}")

    if ttd < 0:
        raise ValidationError(f"TTD must be non-negative, got {ttd}")
    return ttd
