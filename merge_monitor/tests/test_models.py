"""
Tests for header parsing, metric names and hex helpers
"""

import pytest

from merge_monitor.exceptions import ValidationError
from merge_monitor.models import BlockHeader, MetricName
from merge_monitor.utils import parse_data, parse_quantity, parse_ttd, to_block_param


PRE_LONDON_BLOCK = {
    "number": "0x1b4",
    "hash": "0xdc0818cf78f21a8e70579cb46a43643f78291264dda342ae31049421c82d21ae",
    "timestamp": "0x55ba467c",
    "difficulty": "0x4ea3f27bc",
    "gasUsed": "0x0",
    "gasLimit": "0x1388",
    "mixHash": "0x4fffe9ae21f1c9e15207b1f472d5bbdd68c9595d461666602f2be20daf5e7843",
    "sha3Uncles": "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347",
    "nonce": "0x689056015818adbe",
}


class TestBlockHeader:

    def test_from_rpc_pre_london(self):
        header = BlockHeader.from_rpc(PRE_LONDON_BLOCK)

        assert header.number == 436
        assert header.difficulty == 0x4ea3f27bc
        assert header.base_fee is None
        assert header.gas_limit == 5000
        assert len(header.mix_hash) == 32
        assert header.nonce == bytes.fromhex("689056015818adbe")

    def test_post_merge_header_without_nonce(self):
        block = dict(PRE_LONDON_BLOCK, difficulty="0x0", baseFeePerGas="0x7")
        del block["nonce"]

        header = BlockHeader.from_rpc(block)

        assert header.difficulty == 0
        assert header.base_fee == 7
        assert header.nonce_uint64 == 0

    def test_hash_integers(self):
        header = BlockHeader.from_rpc(PRE_LONDON_BLOCK)

        assert header.mix_hash_int == int(PRE_LONDON_BLOCK["mixHash"], 16)
        assert header.uncles_hash_int == int(PRE_LONDON_BLOCK["sha3Uncles"], 16)


class TestMetricName:

    @pytest.mark.parametrize("name,expected", [
        ("BlockNonce", MetricName.BLOCK_NONCE),
        ("nonce", MetricName.BLOCK_NONCE),
        ("base-fee", MetricName.BLOCK_BASE_FEE),
        ("block_gas_used", MetricName.BLOCK_GAS_USED),
        ("BLOCK_MIX_HASH", MetricName.BLOCK_MIX_HASH),
        ("count", MetricName.BLOCK_COUNT),
        ("uncle-hash", MetricName.BLOCK_UNCLES_HASH),
        ("uncles-hash", MetricName.BLOCK_UNCLES_HASH),
        ("block-presence-count", MetricName.BLOCK_COUNT),
        ("mix-digest", MetricName.BLOCK_MIX_HASH),
    ])
    def test_loose_names(self, name, expected):
        assert MetricName(name) is expected

    @pytest.mark.parametrize("name", ["unknown-metric", "block", "", 5])
    def test_unknown(self, name):
        with pytest.raises(ValueError):
            MetricName(name)


class TestHexHelpers:

    def test_parse_quantity(self):
        assert parse_quantity("0x0") == 0
        assert parse_quantity("0xff") == 255
        with pytest.raises(ValueError):
            parse_quantity("255")

    def test_parse_data_pads(self):
        assert parse_data("0x7", 8) == b"\x00" * 7 + b"\x07"
        with pytest.raises(ValueError):
            parse_data("0x" + "00" * 9, 8)

    def test_to_block_param(self):
        assert to_block_param(0) == "0x0"
        assert to_block_param(15537393) == "0xed14f1"
        assert to_block_param("latest") == "latest"
        with pytest.raises(ValidationError):
            to_block_param(-1)
        with pytest.raises(ValidationError):
            to_block_param("newest")


class TestParseTTD:

    def test_forms(self):
        assert parse_ttd(58750000000000000000000) == 58750000000000000000000
        assert parse_ttd("58750000000000000000000") == 58750000000000000000000
        assert parse_ttd("58_750_000_000_000_000_000_000") == 58750000000000000000000
        assert parse_ttd("0x44c") == 1100
        assert parse_ttd(0) == 0

    @pytest.mark.parametrize("value", [-1, "-5", "ttd", "0xzz", None, True, 1.5])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_ttd(value)
