"""
merge-monitor: execution-layer node adapter for tracking the terminal total difficulty transition
"""

from .execution_client import ExecutionClient
from .deadline import CallDeadline, DeadlineSlot
from .models import BlockHeader, ClientLayer, ClientType, DataPoint, MetricName
from .rpc import RpcTransport
from .utils import parse_ttd
from .exceptions import *


__version__ = "1.0.0"
__author__ = "PGDN Team"

__all__ = [
    "ExecutionClient",
    "CallDeadline",
    "DeadlineSlot",
    "BlockHeader",
    "ClientLayer",
    "ClientType",
    "DataPoint",
    "MetricName",
    "RpcTransport",
    "parse_ttd",
    "MergeMonitorException",
    "NodeConnectionError",
    "RpcCallError",
    "TransitionNotFoundError",
    "InvalidMetricNameError",
    "ValidationError"
]
