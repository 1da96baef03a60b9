"""
Ingest layer: TMI chatter listing
"""

from .chatters import ChattersFetchError, aggregate_chatters, fetch_chatters

__all__ = [
    "ChattersFetchError",
    "aggregate_chatters",
    "fetch_chatters",
]
