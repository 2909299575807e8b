"""
Shared fixtures: an in-memory chain behind the RpcTransport interface
"""

import threading
import time

import pytest

from merge_monitor.exceptions import RpcCallError
from merge_monitor.models import BlockHeader


class FakeTransport:
    """
    Serves headers for a simulated chain and records every call.

    Tracks how many calls are in flight at once so tests can check that a
    client never overlaps requests.
    """

    def __init__(self, difficulties, nonce=b"\x00" * 8, base_fee=7, delay=0.0, version="Geth/v1.10.23-stable"):
        self.difficulties = list(difficulties)
        self.nonce = nonce
        self.base_fee = base_fee
        self.delay = delay
        self.version = version
        self.calls = []
        self.fail_on = {}
        self.closed = False

        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    @property
    def head(self):
        return len(self.difficulties) - 1

    def make_header(self, number):
        return BlockHeader(
            number=number,
            hash=number.to_bytes(32, "big"),
            timestamp=1_600_000_000 + 12 * number,
            difficulty=self.difficulties[number],
            gas_used=21_000 * number,
            gas_limit=30_000_000,
            mix_hash=(0xAB).to_bytes(32, "big"),
            uncles_hash=bytes.fromhex("1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"),
            nonce=self.nonce,
            base_fee=self.base_fee,
        )

    def _enter(self, name, arg, deadline):
        assert deadline is not None and not deadline.expired
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.calls.append((name, arg))
        if self.delay:
            time.sleep(self.delay)
        if (name, arg) in self.fail_on:
            self._exit()
            raise self.fail_on[(name, arg)]

    def _exit(self):
        with self._lock:
            self.in_flight -= 1

    def call(self, method, params, deadline):
        self._enter(method, tuple(params or []), deadline)
        try:
            if method == "web3_clientVersion":
                return self.version
            raise RpcCallError(method, "method not found")
        finally:
            self._exit()

    def header_by_number(self, block, deadline):
        self._enter("header", block, deadline)
        try:
            number = self.head if block == "latest" else block
            if number > self.head:
                raise RpcCallError("eth_getBlockByNumber", f"block {block} not found")
            return self.make_header(number)
        finally:
            self._exit()

    def total_difficulty(self, block, deadline):
        self._enter("total_difficulty", block, deadline)
        try:
            number = self.head if block == "latest" else block
            return sum(self.difficulties[:number + 1])
        finally:
            self._exit()

    def block_number(self, deadline):
        self._enter("block_number", None, deadline)
        try:
            return self.head
        finally:
            self._exit()

    def close(self):
        self.closed = True


def pos_chain(pow_blocks, pos_blocks, difficulty=100):
    """Difficulties for pow_blocks non-zero blocks followed by pos_blocks zero blocks"""
    return [difficulty] * pow_blocks + [0] * pos_blocks


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances over explicit difficulties"""
    return FakeTransport


@pytest.fixture
def make_chain():
    """Factory: make_chain(pow_blocks, pos_blocks, **kwargs) -> FakeTransport"""
    def _make(pow_blocks, pos_blocks, difficulty=100, **kwargs):
        return FakeTransport(pos_chain(pow_blocks, pos_blocks, difficulty), **kwargs)
    return _make


@pytest.fixture
def chain():
    """Blocks 0..10 proof-of-work, 11..15 proof-of-stake"""
    return FakeTransport(pos_chain(11, 5))
