"""
Outcome classification and formatting of search results.
"""

from enum import Enum

from adversarial_search.errors import ContractViolation


class Outcome(Enum):
    FIRST_PLAYER_WIN = 1
    SECOND_PLAYER_WIN = -1
    DRAW = 0


OUTCOME_TEXT = {
    Outcome.FIRST_PLAYER_WIN: "first player wins",
    Outcome.SECOND_PLAYER_WIN: "second player wins",
    Outcome.DRAW: "draw",
}


def outcome_of(value: int) -> Outcome:
    """
    Classify a terminal evaluation.

    Raises:
        ContractViolation: value is not -1, 0 or 1
    """
    if value not in (-1, 0, 1):
        raise ContractViolation(f"terminal evaluation must be -1, 0 or 1, got {value}")
    return Outcome(value)


def eval_to_string(score: int) -> str:
    """
    Describe a solve() result.

    Args:
        score: Signed plies until resolution, first player's perspective

    Returns:
        e.g. "draw", "first player wins in 5 plies"
    """
    if score == 0:
        return OUTCOME_TEXT[Outcome.DRAW]
    outcome = Outcome.FIRST_PLAYER_WIN if score > 0 else Outcome.SECOND_PLAYER_WIN
    plies = abs(score)
    return f"{OUTCOME_TEXT[outcome]} in {plies} {'ply' if plies == 1 else 'plies'}"


def describe_terminal(state) -> str:
    """
    Text for the final position of a game, for display only.

    An evaluation outside {-1, 0, 1} is reported as an invalid state
    instead of raising.
    """
    value = state.evaluate()
    if value not in (-1, 0, 1):
        return f"invalid state: evaluate() returned {value}"
    return OUTCOME_TEXT[Outcome(value)]


def describe_result(state, score: int) -> str:
    """
    Describe a solve() score for the position it was computed on.

    A position that is already decided solves to 0 plies whoever won, so
    it is described by its terminal outcome instead of as a draw.
    """
    if state.is_terminal():
        return describe_terminal(state)
    return eval_to_string(score)
