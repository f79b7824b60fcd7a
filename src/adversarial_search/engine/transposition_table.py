"""
Transposition table for caching alpha-beta search results.

The transposition table stores previously computed positions so that a
position reached through different move orders is only searched once.

Key concepts:
- Bound types: EXACT (searched with the full window), LOWER (fail-high/beta
  cutoff), UPPER (fail-low, no move improved on alpha)
- Replacement policy: always replace (last write wins, no depth preference)
- Lifetime: one table per top-level search call; nothing is persisted
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import numpy as np


class BoundType(Enum):
    """Type of bound stored in transposition table entry."""
    EXACT = 0   # Exact value
    LOWER = 1   # Lower bound (beta cutoff, actual value >= stored value)
    UPPER = 2   # Upper bound (alpha cutoff, actual value <= stored value)


@dataclass
class TTEntry:
    """
    Transposition table entry storing cached search results.

    Attributes:
        key: Full 64-bit key of the position, checked on lookup
        depth: Remaining depth searched when this entry was stored
        bound: Type of bound (EXACT/LOWER/UPPER)
        value: Search value (or bound) from the side to move's perspective
    """
    key: int
    depth: int
    bound: BoundType
    value: int


class TranspositionTable:
    """
    Fixed-size transposition table.

    Implementation:
    - Power-of-2 sized table for fast modulo via bit masking
    - Full key stored per entry so slot clashes are detected; two positions
      with the same 64-bit key are indistinguishable and share an entry
    - Always-replace: a store overwrites whatever occupied the slot
    """

    def __init__(self, size_mb: int = 16):
        """
        Initialize transposition table.

        Args:
            size_mb: Table size in megabytes (rounded down to a power of 2 entries)
        """
        bytes_per_entry = 64  # Conservative estimate with Python overhead
        num_entries = max(1, (size_mb * 1024 * 1024) // bytes_per_entry)

        # Round down to nearest power of 2 for fast modulo
        self.num_entries = 2 ** int(np.log2(num_entries))
        self.index_mask = self.num_entries - 1

        self.table: list[Optional[TTEntry]] = [None] * self.num_entries

        # Statistics
        self.hits = 0
        self.misses = 0
        self.collisions = 0
        self.stores = 0

    def __len__(self):
        return sum(1 for entry in self.table if entry is not None)

    def _get_index(self, key: int) -> int:
        """Get table index from key (fast modulo via bit masking)."""
        return key & self.index_mask

    def lookup(self, key: int) -> Optional[TTEntry]:
        """
        Look up the entry stored for a key.

        Depth and bound checks are left to the search, which knows its
        remaining depth and window.

        Args:
            key: Position key

        Returns:
            The stored entry, or None on a miss or slot clash
        """
        entry = self.table[self._get_index(key)]

        if entry is None:
            self.misses += 1
            return None

        if entry.key != key:
            self.collisions += 1
            self.misses += 1
            return None

        self.hits += 1
        return entry

    def store(self, key: int, depth: int, bound: BoundType, value: int):
        """
        Store a search result, overwriting any previous entry in the slot.

        Args:
            key: Position key
            depth: Remaining depth searched
            bound: Type of bound
            value: Search value or bound
        """
        self.table[self._get_index(key)] = TTEntry(key=key, depth=depth, bound=bound, value=value)
        self.stores += 1

    def clear(self):
        """Clear all entries."""
        self.table = [None] * self.num_entries
        self._reset_stats()

    def _reset_stats(self):
        """Reset statistics counters."""
        self.hits = 0
        self.misses = 0
        self.collisions = 0
        self.stores = 0

    def get_stats(self) -> dict:
        """
        Get transposition table statistics.

        Returns:
            Dictionary with hits, misses, hit rate, collisions
        """
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'collisions': self.collisions,
            'stores': self.stores,
            'size_entries': self.num_entries,
        }

    def get_fill_rate(self) -> float:
        """
        Calculate percentage of table slots occupied.

        Returns:
            Fill rate as percentage (0-100)
        """
        return (len(self) / self.num_entries) * 100.0
