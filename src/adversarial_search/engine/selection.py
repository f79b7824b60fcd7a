"""
Move selection and principal variations built on the search primitives.
"""

import logging
import random
from typing import Optional

from tqdm import tqdm

from adversarial_search.config import EXPECTI_CONFIG, SEARCH_CONFIG
from adversarial_search.game.game import ToMove, played
from adversarial_search.engine.alphabeta import SCORE_INF, ensure_recursion_headroom, negamax, to_plies
from adversarial_search.engine.expectiminimax import expectiminimax


logger = logging.getLogger(__name__)


def score_moves(state, depth: int) -> list:
    """
    Score every root move with a full-window negamax.

    Args:
        state: Game state (restored before returning)
        depth: Depth budget at the root

    Returns:
        (move, value) pairs in generation order, values from the root
        mover's perspective
    """
    ensure_recursion_headroom(depth)
    scored = []
    for move in state.legal_moves():
        with played(state, move):
            value = -negamax(state, depth - 1, -SCORE_INF, SCORE_INF)
        scored.append((move, value))
    return scored


def best_move(state, depth: Optional[int] = None):
    """
    Pick the best move by exact search.

    Ties go to the first maximal move in generation order.

    Args:
        state: Game state (restored before returning)
        depth: Depth budget (defaults to SEARCH_CONFIG['solve_depth'])

    Returns:
        The chosen move, or None when there are no legal moves
    """
    if depth is None:
        depth = SEARCH_CONFIG['solve_depth']
    scored = score_moves(state, depth)
    if not scored:
        return None
    move, _ = max(scored, key=lambda pair: pair[1])
    return move


def principal_variation(state, depth: Optional[int] = None) -> list:
    """
    Play best moves from the current position until the game ends.

    Args:
        state: Game state (restored before returning)
        depth: Depth budget for every best_move call

    Returns:
        The moves played, in order
    """
    line = []
    try:
        while not state.is_terminal():
            move = best_move(state, depth)
            if move is None:
                break
            state.push(move)
            line.append(move)
    finally:
        for move in reversed(line):
            state.pop(move)
    return line


def analyse_root_moves(state, depth: Optional[int] = None, progress: bool = False) -> list:
    """
    Solve the position after each root move.

    Args:
        state: Game state (restored before returning)
        depth: Depth budget at the root
        progress: Show a tqdm progress bar

    Returns:
        (move, plies) pairs sorted best first for the root mover, where plies
        follows the solve() convention (first player's perspective)
    """
    if depth is None:
        depth = SEARCH_CONFIG['solve_depth']
    ensure_recursion_headroom(depth)

    mover = state.turn()
    moves = state.legal_moves()
    results = []
    for move in tqdm(moves, desc="Analysing", ncols=80, disable=not progress):
        with played(state, move):
            value = -negamax(state, depth - 1, -SCORE_INF, SCORE_INF)
        results.append((move, value, to_plies(value * mover, depth)))

    results.sort(key=lambda item: item[1], reverse=True)
    return [(move, plies) for move, _, plies in results]


def score_expecti_moves(state, depth: int) -> list:
    """
    Score every root move with expectiminimax.

    Args:
        state: Stochastic game state at a MAX or MIN node (restored)
        depth: Deterministic plies of lookahead at the root

    Returns:
        (move, value) pairs in generation order, values from the first
        player's perspective
    """
    scored = []
    for move in state.legal_moves():
        with played(state, move):
            value = expectiminimax(state, depth - 1)
        scored.append((move, value))
    return scored


def expecti_best_move(state, depth: Optional[int] = None, rng: Optional[random.Random] = None):
    """
    Pick the best move by expectiminimax.

    MAX nodes maximize the value, MIN nodes minimize it. Calling this on a
    CHANCE node is a caller mistake; rather than failing, a random move is
    returned.

    Args:
        state: Stochastic game state (restored before returning)
        depth: Deterministic plies of lookahead (defaults to EXPECTI_CONFIG['depth'])
        rng: Random source for the CHANCE fallback

    Returns:
        The chosen move, or None when there are no legal moves
    """
    if depth is None:
        depth = EXPECTI_CONFIG['depth']
    if rng is None:
        rng = random.Random()

    kind = state.to_move()
    if kind is ToMove.CHANCE:
        logger.warning("expecti_best_move called on a chance node, picking a random move")
        moves = state.legal_moves()
        return rng.choice(moves) if moves else None

    scored = score_expecti_moves(state, depth)
    if not scored:
        return None
    sign = 1 if kind is ToMove.MAX else -1
    move, _ = max(scored, key=lambda pair: sign * pair[1])
    return move


def sample_chance(state, rng: random.Random):
    """Draw a chance outcome from the state's distribution."""
    outcomes = []
    state.generate_legal_moves_with_probabilities(outcomes)
    moves = [move for move, _ in outcomes]
    weights = [probability for _, probability in outcomes]
    return rng.choices(moves, weights=weights, k=1)[0]


def expecti_principal_variation(
    state,
    depth: Optional[int] = None,
    rng: Optional[random.Random] = None,
    max_plies: Optional[int] = None
) -> list:
    """
    Play expectiminimax moves until the game ends, sampling chance nodes.

    Args:
        state: Stochastic game state (restored before returning)
        depth: Lookahead for every expecti_best_move call
        rng: Random source for chance nodes
        max_plies: Stop after this many moves (defaults to
            EXPECTI_CONFIG['max_plies'])

    Returns:
        The moves played, chance outcomes included
    """
    if rng is None:
        rng = random.Random()
    if max_plies is None:
        max_plies = EXPECTI_CONFIG['max_plies']

    line = []
    try:
        while not state.is_terminal() and len(line) < max_plies:
            if state.to_move() is ToMove.CHANCE:
                move = sample_chance(state, rng)
            else:
                move = expecti_best_move(state, depth, rng)
            if move is None:
                break
            state.push(move)
            line.append(move)
    finally:
        for move in reversed(line):
            state.pop(move)
    return line
