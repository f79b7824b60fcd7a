"""
Perft: exhaustive node counting for move generation validation.

perft(state, d) counts the leaves of the game tree d plies deep, treating
terminal positions as leaves. It checks move generation and push/pop
symmetry against known counts, and measures traversal speed.

perft_cached memoizes subtree counts by (position, remaining depth) for nodes
far enough from the leaves, since many games reach the same position through
different move orders. Both functions must agree on every input; a mismatch
means move generation or make/unmake is broken.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from adversarial_search.config import PERFT_CONFIG
from adversarial_search.game.game import played
from adversarial_search.engine.alphabeta import ensure_recursion_headroom


logger = logging.getLogger(__name__)


@dataclass
class PerftResult:
    """One depth of a perft_test run."""
    depth: int
    nodes: int
    elapsed_s: float
    nodes_per_second: float


def perft(board, depth: int) -> int:
    """
    Count leaf nodes at a fixed depth.

    Args:
        board: Game state (restored before returning)
        depth: Plies to enumerate

    Returns:
        Number of leaves

    Raises:
        ValueError: depth is negative
    """
    ensure_recursion_headroom(depth)
    return _perft(board, depth)


def _perft(board, depth):
    if depth == 0 or board.is_terminal():
        return 1

    moves = []
    board.generate_moves(moves)
    if depth == 1:
        return len(moves)

    count = 0
    for m in moves:
        with played(board, m):
            count += _perft(board, depth - 1)
    return count


def perft_cached(
    board,
    depth: int,
    seen: Optional[dict] = None,
    threshold: int = PERFT_CONFIG['cache_threshold']
) -> int:
    """
    Count leaf nodes at a fixed depth, memoizing large subtrees.

    Args:
        board: Game state (restored before returning)
        depth: Plies to enumerate
        seen: Memo from (state copy, depth) to count; a private one is
            created if omitted
        threshold: Only nodes with depth > threshold are memoized

    Returns:
        Number of leaves
    """
    ensure_recursion_headroom(depth)
    if seen is None:
        seen = {}
    return _perft_cached(board, depth, seen, threshold)


def _perft_cached(board, depth, seen, threshold):
    if depth == 0 or board.is_terminal():
        return 1

    if depth > threshold:
        cached = seen.get((board, depth))
        if cached is not None:
            return cached

    moves = []
    board.generate_moves(moves)
    if depth == 1:
        return len(moves)

    count = 0
    for m in moves:
        with played(board, m):
            count += _perft_cached(board, depth - 1, seen, threshold)

    if depth > threshold:
        seen[(board.clone(), depth)] = count

    return count


def perft_test(
    board,
    max_depth: int = PERFT_CONFIG['max_depth'],
    time_budget_s: float = PERFT_CONFIG['time_budget_s']
) -> list[PerftResult]:
    """
    Run memoized perft at increasing depths until a budget is spent.

    The time budget is only checked between depths; a single depth always
    runs to completion.

    Args:
        board: Game state (restored before returning)
        max_depth: Deepest perft to run
        time_budget_s: Wall-clock budget in seconds

    Returns:
        One PerftResult per completed depth
    """
    results = []
    start = time.perf_counter()

    for depth in range(1, max_depth + 1):
        if time.perf_counter() - start > time_budget_s:
            break

        depth_start = time.perf_counter()
        nodes = perft_cached(board, depth)
        elapsed = time.perf_counter() - depth_start
        nps = nodes / elapsed if elapsed > 0 else float('inf')

        result = PerftResult(depth=depth, nodes=nodes, elapsed_s=elapsed, nodes_per_second=nps)
        results.append(result)
        logger.info("perft depth %d: %d nodes in %.3fs (%.0f nodes/sec)", depth, nodes, elapsed, nps)

    return results
