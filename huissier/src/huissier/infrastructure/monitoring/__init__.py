"""
Monitoring and observability infrastructure.
"""

from huissier.infrastructure.monitoring import metrics
from huissier.infrastructure.monitoring.logger import (
    get_logger,
    get_request_id,
    preview,
    set_request_id,
    setup_logging,
)

__all__ = [
    "metrics",
    "get_logger",
    "get_request_id",
    "set_request_id",
    "setup_logging",
    "preview",
]
