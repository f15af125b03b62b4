"""Retry wrapper with pluggable backoff.

Example:
    >>> from logscope.runtime.retry import ExponentialBackoff, RetryPolicy, Retrying
    >>> retrying = Retrying(ambient, RetryPolicy(max_retries=3, retry_on=(ConnectionError,)))
    >>> await retrying.acall(fetch)
"""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff, LinearBackoff
from .policy import NO_RETRY, RetryPolicy, Retrying

__all__ = [
    # Backoff strategies
    "Backoff",
    "ConstantBackoff",
    "ExponentialBackoff",
    "LinearBackoff",
    # Policy & layer
    "NO_RETRY",
    "RetryPolicy",
    "Retrying",
]
