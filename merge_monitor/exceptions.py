"""
Custom exceptions for merge-monitor
"""


class MergeMonitorException(Exception):
    """Base exception for merge-monitor library"""
    pass


class NodeConnectionError(MergeMonitorException):
    """Transport could not be set up for an endpoint"""

    def __init__(self, rpc_url: str, message: str):
        self.rpc_url = rpc_url
        super().__init__(f"Unable to connect to {rpc_url}: {message}")


class RpcCallError(MergeMonitorException):
    """A single RPC round trip failed"""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"RPC call {method} failed: {message}")


class TransitionNotFoundError(MergeMonitorException):
    """Backward scan reached genesis without a non-zero difficulty block"""

    def __init__(self, client_id: int, start_block: int):
        self.client_id = client_id
        self.start_block = start_block
        super().__init__(
            f"Unable to get TTD block for client {client_id}: "
            f"no non-zero difficulty block between {start_block} and genesis"
        )


class InvalidMetricNameError(MergeMonitorException):
    """Requested metric is not one the client can read"""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Invalid data name: {name}")


class ValidationError(MergeMonitorException):
    """Input validation error"""
    pass
