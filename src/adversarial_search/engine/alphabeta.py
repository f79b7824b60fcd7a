"""
Alpha-beta negamax search over the game contract.

Negamax exploits value(me) = -value(opponent), so one recursive function
serves both players. The state is mutated in place with push/pop; every
child is searched inside a `played` block so pruning breaks still unmake the
move.

Scoring:

    def negamax(node, depth, alpha, beta):
        if depth == 0 or terminal:
            return turn * evaluate * depth
        ...

Multiplying the terminal result by the remaining depth makes a result found
near the root (much budget left) larger in magnitude than the same result
found deep in the tree, so the search prefers the fastest win and the slowest
loss. This only means "plies until resolution" when the root budget exceeds
the longest possible game; `solve` documents that precondition and
`SEARCH_CONFIG['solve_depth']` is far beyond any game shipped here.

The transposition-table variant consults and fills a TranspositionTable keyed
by the state's hashkey(). By default only the node it is called on uses the
table and the children are searched by plain negamax; pass deep=True to let
the table span the whole subtree.
"""

import logging
import sys
from typing import Optional

from adversarial_search.config import SEARCH_CONFIG
from adversarial_search.game.game import played
from adversarial_search.engine.transposition_table import TranspositionTable, BoundType


logger = logging.getLogger(__name__)

# Window bounds, larger than any depth-scaled score
SCORE_INF = 10**9


def ensure_recursion_headroom(depth: int):
    """
    Raise the interpreter recursion limit to cover a depth budget.

    Recursion depth equals plies explored, which natural termination keeps
    far below large solve budgets; a broken is_terminal() could otherwise
    recurse to the full budget.
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    needed = depth + SEARCH_CONFIG['recursion_margin']
    if sys.getrecursionlimit() < needed:
        logger.debug("Raising recursion limit to %d", needed)
        sys.setrecursionlimit(needed)


def negamax(node, depth: int, alpha: int, beta: int) -> int:
    """
    Fail-soft alpha-beta negamax.

    Args:
        node: Game state, restored before returning
        depth: Remaining depth budget
        alpha: Alpha bound
        beta: Beta bound

    Returns:
        Score from the side to move's perspective
    """
    if depth == 0 or node.is_terminal():
        return node.turn() * node.evaluate() * depth

    buffer = []
    node.generate_moves(buffer)
    if not buffer:
        return node.turn() * node.evaluate() * depth

    best = -SCORE_INF
    for move in buffer:
        with played(node, move):
            value = -negamax(node, depth - 1, -beta, -alpha)
        if value > best:
            best = value
        if best > alpha:
            alpha = best
        if best >= beta:
            break

    return best


def negamax_tt(
    node,
    depth: int,
    alpha: int,
    beta: int,
    table: TranspositionTable,
    deep: bool = False
) -> int:
    """
    Negamax with a transposition table.

    Args:
        node: Keyed game state, restored before returning
        depth: Remaining depth budget
        alpha: Alpha bound
        beta: Beta bound
        table: Table owned by the calling search
        deep: Search children with negamax_tt instead of negamax

    Returns:
        Score from the side to move's perspective
    """
    key = node.hashkey()
    entry = table.lookup(key)
    if entry is not None and entry.depth >= depth:
        if entry.bound == BoundType.EXACT:
            return entry.value
        elif entry.bound == BoundType.LOWER:
            alpha = max(alpha, entry.value)
        elif entry.bound == BoundType.UPPER:
            beta = min(beta, entry.value)
        if alpha >= beta:
            return alpha

    if depth == 0 or node.is_terminal():
        return node.turn() * node.evaluate() * depth

    buffer = []
    node.generate_moves(buffer)
    if not buffer:
        return node.turn() * node.evaluate() * depth

    original_alpha = alpha
    best = -SCORE_INF
    for move in buffer:
        with played(node, move):
            if deep:
                value = -negamax_tt(node, depth - 1, -beta, -alpha, table, deep=True)
            else:
                value = -negamax(node, depth - 1, -beta, -alpha)
        if value > best:
            best = value
        if best > alpha:
            alpha = best
        if best >= beta:
            break

    if best <= original_alpha:
        bound = BoundType.UPPER  # All moves failed low
    elif best >= beta:
        bound = BoundType.LOWER  # We failed high
    else:
        bound = BoundType.EXACT
    table.store(key, depth, bound, best)

    return best


def to_plies(value: int, depth: int) -> int:
    """
    Convert a depth-scaled root score into signed plies until resolution.

    Args:
        value: Root score from the first player's perspective
        depth: Depth budget the score was computed with

    Returns:
        0 for a draw, +n if the first player wins in n plies, -n if the
        second player does
    """
    if value == 0:
        return 0
    plies = depth - abs(value)
    return plies if value > 0 else -plies


def solve(state, depth: Optional[int] = None) -> int:
    """
    Solve a position exactly.

    The depth budget must exceed the longest possible game from this
    position, otherwise the result is not a ply count.
    A position that is already decided scores 0 whoever won; use
    describe_result() rather than eval_to_string() to report it.

    Args:
        state: Game state (restored before returning)
        depth: Depth budget (defaults to SEARCH_CONFIG['solve_depth'])

    Returns:
        Signed plies until resolution from the first player's perspective
        (see to_plies)
    """
    if depth is None:
        depth = SEARCH_CONFIG['solve_depth']
    ensure_recursion_headroom(depth)

    value = negamax(state, depth, -SCORE_INF, SCORE_INF) * state.turn()
    result = to_plies(value, depth)
    logger.debug("solve(%r, depth=%d) -> %d", state, depth, result)
    return result


def solve_tt(
    state,
    depth: Optional[int] = None,
    deep: bool = False
) -> int:
    """
    Solve a position exactly using a transposition table.

    Every call owns a fresh table: stored values are scaled by the depth
    budget, so entries from another call would be misread.

    Args:
        state: Keyed game state (restored before returning)
        depth: Depth budget (defaults to SEARCH_CONFIG['solve_depth'])
        deep: Use the table throughout the tree, not just at the root

    Returns:
        Same convention as solve()
    """
    if depth is None:
        depth = SEARCH_CONFIG['solve_depth']
    ensure_recursion_headroom(depth)
    table = TranspositionTable(size_mb=SEARCH_CONFIG['tt_size_mb'])

    value = negamax_tt(state, depth, -SCORE_INF, SCORE_INF, table, deep=deep) * state.turn()
    result = to_plies(value, depth)
    logger.debug("solve_tt(%r, depth=%d, deep=%s) -> %d, tt %s", state, depth, deep, result, table.get_stats())
    return result
