"""Runtime: wrapper layers that stay log-capable through generic delegation.

- LogLayer/StateLayer: the delegation adapter and its stateful form
- Retrying: retry wrapper with backoff
- Transactional: compensation journal with commit/rollback
- TaskGroup, ContextThreadPool, to_thread: concurrency that carries context
"""

from .concurrency import ContextThreadPool, TaskGroup, to_thread
from .layers import LogLayer, StateLayer
from .retry import (
    NO_RETRY,
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    RetryPolicy,
    Retrying,
)
from .transaction import Compensation, Transactional

__all__ = [
    # Delegation
    "LogLayer", "StateLayer",
    # Retry
    "Retrying", "RetryPolicy", "NO_RETRY", "Backoff", "ExponentialBackoff", "LinearBackoff", "ConstantBackoff",
    # Transactions
    "Transactional", "Compensation",
    # Concurrency
    "TaskGroup", "ContextThreadPool", "to_thread",
]
