"""
Zobrist hashing keys for game positions.

Zobrist hashing gives O(1) incremental position keys for transposition
tables. A table of random 64-bit keys is generated once per key layout
(e.g. (player, square) for a grid game); a position's key is the XOR of the
keys of its features, and a move updates it with one XOR per feature changed.

Implementation:
- Pre-generate random 64-bit keys for every feature index (seeded RNG, so keys
  are reproducible across runs)
- Hash = XOR of all keys corresponding to present features
- Incremental update: hash ^= key[feature]
- Tables are built once per layout at module scope and never mutated
"""

import numpy as np
from typing import Iterable, Optional


class ZobristHasher:
    """
    Zobrist key table for an arbitrary feature layout.

    Example: tic-tac-toe uses shape (2, 9): 2 players x 9 squares = 18 keys.

    Features:
    - Deterministic key generation (seeded RNG for reproducibility)
    - Keys exported as plain Python ints for fast XOR in make/unmake
    """

    def __init__(self, shape: tuple, seed: int = 42):
        """
        Initialize Zobrist table with random 64-bit keys.

        Args:
            shape: Feature layout, e.g. (players, squares)
            seed: Random seed for reproducibility
        """
        self.shape = tuple(shape)

        # Use seeded RNG for reproducible hashes
        rng = np.random.RandomState(seed)

        self.zobrist_table = rng.randint(
            0, 2**63 - 1,
            size=self.shape,
            dtype=np.uint64
        )

        # Side-to-move key (XOR this on every change of turn)
        self.side_to_move_hash = int(rng.randint(0, 2**63 - 1, dtype=np.uint64))

        # Nested lists of Python ints mirroring zobrist_table
        self.keys = self.zobrist_table.tolist()

    def key(self, *index) -> int:
        """Return the key of a single feature."""
        return int(self.zobrist_table[index])

    def hash_features(self, features: Iterable[tuple], side_to_move: int = 1) -> int:
        """
        Compute a key from scratch.

        Args:
            features: Index tuples of the features present in the position
            side_to_move: Player to move (1 or -1)

        Returns:
            64-bit hash value (int)
        """
        hash_value = 0
        for index in features:
            hash_value ^= int(self.zobrist_table[tuple(index)])

        if side_to_move == -1:
            hash_value ^= self.side_to_move_hash

        return hash_value


# One hasher per (shape, seed), shared by every state of a game type
_hashers: dict = {}


def get_zobrist_hasher(shape: tuple, seed: int = 42) -> ZobristHasher:
    """
    Get or create the shared Zobrist hasher for a key layout.

    Args:
        shape: Feature layout
        seed: Random seed

    Returns:
        ZobristHasher instance
    """
    cache_key = (tuple(shape), seed)
    hasher: Optional[ZobristHasher] = _hashers.get(cache_key)

    if hasher is None:
        hasher = ZobristHasher(shape, seed)
        _hashers[cache_key] = hasher

    return hasher
