"""
Utilities package for the query-string SerDe.

Exports shared helpers for logging and profiling.
Keep this package lightweight and free of decoding logic.
"""

from querystring_serde.utils.logging import configure_logging, get_logger
from querystring_serde.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
