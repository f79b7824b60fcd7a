"""
Depth-limited expectiminimax for games with chance events.

Nodes are classified by to_move():
- MAX: maximum over children at depth - 1
- MIN: minimum over children at depth - 1
- CHANCE: probability-weighted average over children at the *same* depth

A chance resolution does not consume a ply, since the deterministic move that
follows it will, so the lookahead horizon counts deterministic plies only.
Leaves (depth 0 or terminal) are scored with heuristic(), which is from the
first player's perspective, so no negation happens anywhere.

Probabilities are turned into integer fixed-point weights before weighting,
and the sum is scaled back down with truncation toward zero.
"""

from adversarial_search.config import EXPECTI_CONFIG
from adversarial_search.game.game import ToMove, played
from adversarial_search.engine.alphabeta import ensure_recursion_headroom


def probability_weight(probability: float, scale: int = EXPECTI_CONFIG['probability_scale']) -> int:
    """Fixed-point weight of a probability."""
    return round(probability * scale)


def expectiminimax(node, depth: int) -> int:
    """
    Expectiminimax value of a position.

    Args:
        node: Stochastic, partially solvable game state (restored before
            returning)
        depth: Deterministic plies of lookahead

    Returns:
        Heuristic-scale value from the first player's perspective

    Raises:
        ValueError: depth is negative
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    # A chance level sits above every deterministic ply
    ensure_recursion_headroom(2 * depth + 1)
    return _expectiminimax(node, depth)


def _expectiminimax(node, depth):
    if depth == 0 or node.is_terminal():
        return node.heuristic()

    kind = node.to_move()

    if kind is ToMove.CHANCE:
        scale = EXPECTI_CONFIG['probability_scale']
        outcomes = []
        node.generate_legal_moves_with_probabilities(outcomes)
        total = 0
        for move, probability in outcomes:
            with played(node, move):
                total += _expectiminimax(node, depth) * probability_weight(probability, scale)
        average = abs(total) // scale
        return average if total >= 0 else -average

    buffer = []
    node.generate_moves(buffer)
    if not buffer:
        return node.heuristic()

    if kind is ToMove.MAX:
        best = None
        for move in buffer:
            with played(node, move):
                value = _expectiminimax(node, depth - 1)
            if best is None or value > best:
                best = value
        return best

    best = None
    for move in buffer:
        with played(node, move):
            value = _expectiminimax(node, depth - 1)
        if best is None or value < best:
            best = value
    return best
