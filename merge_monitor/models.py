#!/usr/bin/env python3
"""
Execution Client Data Models
Data structures for execution-layer headers and per-block metric values
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any, Optional

from .utils import parse_quantity, parse_data


class ClientType(str, Enum):
    """Execution client implementations the monitor knows about"""
    GETH = "geth"
    NETHERMIND = "nethermind"
    BESU = "besu"
    ERIGON = "erigon"
    ETHEREUMJS = "ethereumjs"
    RETH = "reth"
    UNKNOWN = "unknown"


class ClientLayer(str, Enum):
    EXECUTION = "execution"
    BEACON = "beacon"


class MetricName(str, Enum):
    """Per-block values an execution client can be asked for"""
    BLOCK_COUNT = "BlockCount"
    BLOCK_BASE_FEE = "BlockBaseFee"
    BLOCK_GAS_USED = "BlockGasUsed"
    BLOCK_DIFFICULTY = "BlockDifficulty"
    BLOCK_MIX_HASH = "BlockMixHash"
    BLOCK_UNCLES_HASH = "BlockUnclesHash"
    BLOCK_NONCE = "BlockNonce"

    @classmethod
    def _missing_(cls, value):
        # Accept loose spellings: "nonce", "base-fee", "uncle-hash", "block-presence-count"
        if not isinstance(value, str):
            return None
        wanted = _normalize_metric(value)
        if wanted in _METRIC_ALIASES:
            return cls(_METRIC_ALIASES[wanted])
        for member in cls:
            if wanted in (_normalize_metric(member.value), _normalize_metric(member.name)):
                return member
        return None


def _normalize_metric(name: str) -> str:
    key = name.lower().replace("-", "").replace("_", "").replace(" ", "")
    if key.startswith("block") and len(key) > len("block"):
        key = key[len("block"):]
    return key


# Normalized alternate names that do not follow from the member names
_METRIC_ALIASES = {
    "unclehash": "BlockUnclesHash",
    "presencecount": "BlockCount",
    "presence": "BlockCount",
    "mixdigest": "BlockMixHash",
    "basefeepergas": "BlockBaseFee",
}


@dataclass(frozen=True)
class BlockHeader:
    """Read-only snapshot of the header fields the monitor reads"""
    number: int
    hash: bytes
    timestamp: int
    difficulty: int
    gas_used: int
    gas_limit: int
    mix_hash: bytes
    uncles_hash: bytes
    nonce: bytes
    base_fee: Optional[int] = None  # absent before London

    @classmethod
    def from_rpc(cls, block: Dict[str, Any]) -> "BlockHeader":
        """Build a header from an eth_getBlockByNumber result object"""
        base_fee = block.get("baseFeePerGas")
        return cls(
            number=parse_quantity(block["number"]),
            hash=parse_data(block["hash"], 32),
            timestamp=parse_quantity(block["timestamp"]),
            difficulty=parse_quantity(block["difficulty"]),
            gas_used=parse_quantity(block["gasUsed"]),
            gas_limit=parse_quantity(block["gasLimit"]),
            mix_hash=parse_data(block["mixHash"], 32),
            uncles_hash=parse_data(block["sha3Uncles"], 32),
            nonce=parse_data(block.get("nonce", "0x0000000000000000"), 8),
            base_fee=parse_quantity(base_fee) if base_fee is not None else None,
        )

    @property
    def mix_hash_int(self) -> int:
        return int.from_bytes(self.mix_hash, "big")

    @property
    def uncles_hash_int(self) -> int:
        return int.from_bytes(self.uncles_hash, "big")

    @property
    def nonce_uint64(self) -> int:
        return int.from_bytes(self.nonce, "big")


@dataclass(frozen=True)
class DataPoint:
    """A single metric value read from one block"""
    metric: MetricName
    block_number: int
    value: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["metric"] = self.metric.value
        return data
