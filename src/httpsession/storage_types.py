"""
Storage Types and Data Classes

This module contains the data structures reported by session stores.
"""

from dataclasses import dataclass


@dataclass
class StoreStats:
    """Store statistics for monitoring."""

    total_sessions: int
    memory_usage_percent: float
