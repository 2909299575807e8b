#!/usr/bin/env python3
"""
Call Deadlines
Per-call timeout tokens with a single active slot per client
"""

import time
import threading
from typing import Optional

from .exceptions import RpcCallError, ValidationError

DEFAULT_CALL_TIMEOUT = 10.0


def validate_timeout(timeout) -> float:
    """Return timeout as a float, rejecting non-numeric or non-positive values"""
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not timeout > 0:
        raise ValidationError(f"Call timeout must be a positive number of seconds, got {timeout!r}")
    return float(timeout)


class CallDeadline:
    """
    Deadline for one outbound RPC call.

    The clock starts when the deadline is created. A deadline ends either by
    running out of time or by being cancelled when its slot issues a newer one.
    """

    def __init__(self, timeout: float = DEFAULT_CALL_TIMEOUT):
        self.timeout = validate_timeout(timeout)
        self.expires_at = time.monotonic() + self.timeout
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def remaining(self) -> float:
        """Seconds left before the deadline, 0.0 once expired or cancelled"""
        if self.cancelled:
            return 0.0
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self, method: str) -> float:
        """
        Return the time left for method, raising RpcCallError if none is left.

        Args:
            method: RPC method name, used in the error message

        Returns:
            Remaining seconds, suitable as an HTTP timeout
        """
        if self.cancelled:
            raise RpcCallError(method, "context canceled")
        remaining = self.remaining()
        if remaining <= 0.0:
            raise RpcCallError(method, "context deadline exceeded")
        return remaining


class DeadlineSlot:
    """Holds the one live deadline for a client"""

    def __init__(self, timeout: float = DEFAULT_CALL_TIMEOUT):
        self.timeout = validate_timeout(timeout)
        self.current: Optional[CallDeadline] = None
        self.lock = threading.Lock()

    def next(self) -> CallDeadline:
        """Cancel the previous deadline, if any, and issue a fresh one"""
        with self.lock:
            if self.current is not None:
                self.current.cancel()
            self.current = CallDeadline(self.timeout)
            return self.current

    def cancel(self):
        """Cancel the live deadline without issuing a new one"""
        with self.lock:
            if self.current is not None:
                self.current.cancel()
                self.current = None
