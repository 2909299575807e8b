#!/usr/bin/env python3
"""
Execution Client
Adapter for one execution-layer node: TTD tracking and per-block metrics
"""

import logging
import threading
from typing import Callable, Optional, Union

from .deadline import CallDeadline, DeadlineSlot, DEFAULT_CALL_TIMEOUT
from .exceptions import InvalidMetricNameError, RpcCallError, TransitionNotFoundError, ValidationError
from .models import BlockHeader, ClientLayer, ClientType, DataPoint, MetricName
from .rpc import RpcTransport, DEFAULT_USER_AGENT
from .utils import parse_ttd

logger = logging.getLogger(__name__)


class ExecutionClient:
    """
    Monitors a single execution-layer node.

    All node-facing operations run under one lock, so a client instance never
    has two RPC calls in flight. Callers that need parallel requests should
    create one client per node connection.
    """

    def __init__(
        self,
        client_type: ClientType,
        client_id: int,
        rpc_url: str,
        ttd: Union[int, str],
        update_ttd_timestamp: Optional[Callable[[int], None]] = None,
        timeout: float = DEFAULT_CALL_TIMEOUT,
        verify_tls: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[RpcTransport] = None,
    ):
        """
        Dial the node and return a client with no TTD block known yet.

        Args:
            client_type: Execution client implementation behind rpc_url
            client_id: Numeric ID assigned by the owning monitor
            rpc_url: HTTP(S) JSON-RPC endpoint
            ttd: Terminal total difficulty (int, decimal or hex string)
            update_ttd_timestamp: Called once with the TTD block timestamp
            timeout: Per-call deadline in seconds
            verify_tls: Verify HTTPS certificates
            user_agent: User-Agent header sent with each request
            transport: Pre-built transport, skips dialing rpc_url
        """
        try:
            self._client_type = ClientType(client_type)
        except ValueError:
            raise ValidationError(f"Unknown client type: {client_type!r}")
        self._client_id = client_id
        self._rpc_url = rpc_url
        self._ttd = parse_ttd(ttd)
        self.update_ttd_timestamp = update_ttd_timestamp

        self.ttd_block_number: Optional[int] = None
        self.ttd_block_timestamp: int = 0

        self._lock = threading.Lock()
        self._deadlines = DeadlineSlot(timeout)
        self.rpc = transport or RpcTransport.dial(rpc_url, verify_tls=verify_tls, user_agent=user_agent)
        logger.debug(f"Execution client {client_id} ({self._client_type.value}) ready at {rpc_url}")

    # Identity

    @property
    def client_type(self) -> ClientType:
        return self._client_type

    @property
    def client_id(self) -> int:
        return self._client_id

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    @property
    def ttd(self) -> int:
        return self._ttd

    def client_layer(self) -> ClientLayer:
        return ClientLayer.EXECUTION

    def __str__(self) -> str:
        return self._rpc_url

    def __repr__(self) -> str:
        return f"ExecutionClient(type={self._client_type.value}, id={self._client_id}, url={self._rpc_url})"

    def ctx(self) -> CallDeadline:
        """Deadline for the next RPC call; cancels the previous one"""
        return self._deadlines.next()

    # Node queries

    def client_version(self) -> str:
        with self._lock:
            version = self.rpc.call("web3_clientVersion", [], self.ctx())
        if version is None:
            raise RpcCallError("web3_clientVersion", "null result")
        return str(version)

    def get_latest_block_number(self) -> int:
        with self._lock:
            return self.rpc.block_number(self.ctx())

    def update_get_ttd_block_number(self) -> Optional[int]:
        """
        Return the TTD block number, locating it on first success.

        Returns None while the chain's total difficulty is below the TTD.
        Once found the block number is cached and later calls make no RPC
        requests.

        Raises:
            TransitionNotFoundError: genesis reached without a non-zero
                difficulty block
            RpcCallError: any RPC failure during the search
        """
        with self._lock:
            if self.ttd_block_number is not None:
                return self.ttd_block_number

            total_difficulty = self.rpc.total_difficulty("latest", self.ctx())
            if total_difficulty < self._ttd:
                logger.debug(f"Client {self._client_id}: total difficulty {total_difficulty} below TTD {self._ttd}")
                return None

            # TTD reached: walk back from head to the last block with non-zero difficulty
            latest = self.rpc.header_by_number("latest", self.ctx())
            header = self._find_ttd_block(latest)

            self.ttd_block_number = header.number
            self.ttd_block_timestamp = header.timestamp
            logger.info(f"TTD block reached: client={self._client_id} block={header.number} timestamp={header.timestamp}")
            if self.update_ttd_timestamp is not None:
                self.update_ttd_timestamp(self.ttd_block_timestamp)

            return self.ttd_block_number

    def _find_ttd_block(self, latest: BlockHeader) -> BlockHeader:
        header = latest
        while header.difficulty == 0:
            if header.number == 0:
                raise TransitionNotFoundError(self._client_id, latest.number)
            logger.debug(f"Client {self._client_id}: block {header.number} has zero difficulty, stepping back")
            header = self.rpc.header_by_number(header.number - 1, self.ctx())
        return header

    def get_data_point(self, data_name: Union[MetricName, str], block_number: int) -> DataPoint:
        """
        Read one metric value from a block header.

        Args:
            data_name: MetricName or its string value
            block_number: Block to read

        Returns:
            DataPoint carrying the integer value
        """
        try:
            metric = MetricName(data_name)
        except ValueError:
            raise InvalidMetricNameError(data_name)
        if isinstance(block_number, bool) or not isinstance(block_number, int) or block_number < 0:
            raise ValidationError(f"Block number must be a non-negative integer, got {block_number!r}")

        with self._lock:
            header = self.rpc.header_by_number(block_number, self.ctx())

        if metric is MetricName.BLOCK_COUNT:
            value = 1
        elif metric is MetricName.BLOCK_BASE_FEE:
            value = header.base_fee
        elif metric is MetricName.BLOCK_GAS_USED:
            value = header.gas_used
        elif metric is MetricName.BLOCK_DIFFICULTY:
            value = header.difficulty
        elif metric is MetricName.BLOCK_MIX_HASH:
            value = header.mix_hash_int
        elif metric is MetricName.BLOCK_UNCLES_HASH:
            value = header.uncles_hash_int
        else:
            value = header.nonce_uint64

        return DataPoint(metric=metric, block_number=block_number, value=value)

    # Lifecycle

    def close(self):
        with self._lock:
            self._deadlines.cancel()
            self.rpc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
