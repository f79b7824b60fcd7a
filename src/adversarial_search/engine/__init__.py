"""
Search engine for two-player zero-sum games.

This module contains the algorithms, all written once against the game
contract in adversarial_search.game:
- Zobrist keys for transposition lookups
- Transposition table with bound classification
- Alpha-beta negamax, with and without a transposition table
- Expectiminimax for games with chance nodes
- Perft node counting, plain and memoized
- Best move and principal variation selection
"""

from adversarial_search.engine.zobrist import ZobristHasher, get_zobrist_hasher
from adversarial_search.engine.transposition_table import TranspositionTable, BoundType, TTEntry
from adversarial_search.engine.alphabeta import (
    SCORE_INF, negamax, negamax_tt, solve, solve_tt, to_plies, ensure_recursion_headroom,
)
from adversarial_search.engine.expectiminimax import expectiminimax
from adversarial_search.engine.perft import PerftResult, perft, perft_cached, perft_test
from adversarial_search.engine.selection import (
    best_move, principal_variation, analyse_root_moves,
    expecti_best_move, expecti_principal_variation, sample_chance,
)
from adversarial_search.engine.outcome import Outcome, outcome_of, eval_to_string, describe_terminal, describe_result

__all__ = [
    'ZobristHasher',
    'get_zobrist_hasher',
    'TranspositionTable',
    'BoundType',
    'TTEntry',
    'SCORE_INF',
    'negamax',
    'negamax_tt',
    'solve',
    'solve_tt',
    'to_plies',
    'ensure_recursion_headroom',
    'expectiminimax',
    'PerftResult',
    'perft',
    'perft_cached',
    'perft_test',
    'best_move',
    'principal_variation',
    'analyse_root_moves',
    'expecti_best_move',
    'expecti_principal_variation',
    'sample_chance',
    'Outcome',
    'outcome_of',
    'eval_to_string',
    'describe_terminal',
    'describe_result',
]
