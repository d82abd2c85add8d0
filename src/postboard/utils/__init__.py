"""Configuration, logging and resilience helpers."""

from .config import PostboardConfig
from .logging import JSONFormatter, setup_logging
from .resilience import CircuitBreaker, CircuitBreakerConfig, CircuitOpenError, CircuitState, with_retries

__all__ = [
    "PostboardConfig",
    "JSONFormatter",
    "setup_logging",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitOpenError",
    "CircuitState",
    "with_retries",
]
