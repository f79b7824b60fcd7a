"""
adversarial_search: exhaustive and heuristic search for two-player zero-sum
games, deterministic or with chance events.
"""

from adversarial_search.game import GAMES, create_game
from adversarial_search.engine import (
    solve, solve_tt, best_move, principal_variation,
    expectiminimax, expecti_best_move, perft, perft_cached,
)

__version__ = "0.1"

__all__ = [
    'GAMES',
    'create_game',
    'solve',
    'solve_tt',
    'best_move',
    'principal_variation',
    'expectiminimax',
    'expecti_best_move',
    'perft',
    'perft_cached',
]
