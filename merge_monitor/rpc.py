#!/usr/bin/env python3
"""
RPC Transport
JSON-RPC over HTTP to a single execution-layer node
"""

import itertools
import json
import logging
import time
from typing import Any, List, Optional, Union

import requests
import urllib3
from urllib3.exceptions import LocationParseError

from .deadline import CallDeadline
from .exceptions import NodeConnectionError, RpcCallError
from .models import BlockHeader
from .utils import parse_quantity, to_block_param

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "merge-monitor/1.0"

# Small reads bound how long a single read can block past the deadline
BODY_CHUNK_SIZE = 8


class RpcTransport:
    """
    Minimal JSON-RPC client for one node.

    Each call takes a CallDeadline and uses its remaining time as the HTTP
    timeout. Failures of any kind surface as RpcCallError; nothing is retried.
    """

    def __init__(self, rpc_url: str, verify_tls: bool = True, user_agent: str = DEFAULT_USER_AGENT):
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)

        self.session = requests.Session()
        self.session.verify = verify_tls
        self.session.headers.update({
            'User-Agent': user_agent,
            'Content-Type': 'application/json',
        })
        self.closed = False

    @classmethod
    def dial(cls, rpc_url: str, verify_tls: bool = True, user_agent: str = DEFAULT_USER_AGENT) -> "RpcTransport":
        """Validate the endpoint and open a session for it"""
        try:
            parsed = urllib3.util.parse_url(rpc_url)
        except LocationParseError as e:
            raise NodeConnectionError(rpc_url, f"invalid URL ({e})")

        if parsed.scheme not in ("http", "https"):
            raise NodeConnectionError(rpc_url, f"no known transport for URL scheme {parsed.scheme!r}")
        if not parsed.host:
            raise NodeConnectionError(rpc_url, "missing host")

        if not verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        logger.debug(f"Dialed RPC endpoint {rpc_url}")
        return cls(rpc_url, verify_tls=verify_tls, user_agent=user_agent)

    def call(self, method: str, params: Optional[List[Any]], deadline: CallDeadline) -> Any:
        """
        Issue one JSON-RPC request and return its decoded result.

        Args:
            method: JSON-RPC method name
            params: Positional parameters
            deadline: Bounds the round trip

        Returns:
            The "result" member of the response, which may be None
        """
        timeout = deadline.check(method)
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }

        start_time = time.time()
        try:
            response = self.session.post(self.rpc_url, json=payload, timeout=timeout, stream=True)
            try:
                raw = self._read_body(response, method, deadline)
            finally:
                response.close()
        except requests.exceptions.Timeout as e:
            raise RpcCallError(method, f"context deadline exceeded ({e})")
        except requests.exceptions.RequestException as e:
            raise RpcCallError(method, str(e))

        response_time = time.time() - start_time
        logger.debug(f"RPC {method} to {self.rpc_url} returned {response.status_code} in {response_time:.3f}s")

        text = raw.decode("utf-8", errors="replace")
        if response.status_code >= 400:
            raise RpcCallError(method, f"HTTP {response.status_code}: {text[:200]}")

        try:
            body = json.loads(raw)
        except ValueError:
            raise RpcCallError(method, f"non-JSON response: {text[:100]}")

        if not isinstance(body, dict):
            raise RpcCallError(method, f"unexpected response format: {str(body)[:100]}")

        if body.get("error"):
            error_info = body["error"]
            logger.warning(f"RPC {method} on {self.rpc_url} returned error: {error_info}")
            if isinstance(error_info, dict):
                raise RpcCallError(method, f"{error_info.get('message', error_info)} (code {error_info.get('code')})")
            raise RpcCallError(method, str(error_info))

        if "result" not in body:
            raise RpcCallError(method, f"response has no result: {str(body)[:100]}")

        return body["result"]

    @staticmethod
    def _read_body(response, method: str, deadline: CallDeadline) -> bytes:
        """
        Read a streamed response body, failing once the deadline passes.

        The HTTP timeout only limits each socket read, so a server trickling
        bytes could otherwise hold the call open indefinitely.
        """
        chunks = []
        for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
            deadline.check(method)
            chunks.append(chunk)
        deadline.check(method)
        return b"".join(chunks)

    def _get_block(self, block: Union[int, str], deadline: CallDeadline) -> dict:
        method = "eth_getBlockByNumber"
        result = self.call(method, [to_block_param(block), False], deadline)
        if result is None:
            raise RpcCallError(method, f"block {block} not found")
        if not isinstance(result, dict):
            raise RpcCallError(method, f"unexpected block format: {str(result)[:100]}")
        return result

    def header_by_number(self, block: Union[int, str], deadline: CallDeadline) -> BlockHeader:
        """Fetch the header of a block by number or tag"""
        block_data = self._get_block(block, deadline)
        try:
            return BlockHeader.from_rpc(block_data)
        except (KeyError, ValueError) as e:
            raise RpcCallError("eth_getBlockByNumber", f"malformed header for block {block}: {e}")

    def total_difficulty(self, block: Union[int, str], deadline: CallDeadline) -> int:
        """Fetch only the totalDifficulty member of a block"""
        block_data = self._get_block(block, deadline)
        value = block_data.get("totalDifficulty")
        if value is None:
            raise RpcCallError("eth_getBlockByNumber", f"block {block} has no totalDifficulty")
        try:
            return parse_quantity(value)
        except ValueError as e:
            raise RpcCallError("eth_getBlockByNumber", str(e))

    def block_number(self, deadline: CallDeadline) -> int:
        method = "eth_blockNumber"
        result = self.call(method, [], deadline)
        try:
            return parse_quantity(result)
        except ValueError as e:
            raise RpcCallError(method, str(e))

    def close(self):
        if not self.closed:
            self.session.close()
            self.closed = True
