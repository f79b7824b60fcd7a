"""
Error types for the search engine.

The engine itself has no recoverable failure modes: a search either runs to
completion or a precondition was violated by the caller. Contract violations
are raised as ContractViolation (an AssertionError) and are never caught
inside the library. MoveNotFoundError is the one user-facing failure, raised
when textual input does not match any generated move.
"""


class SearchError(Exception):
    """Base class for all errors raised by adversarial_search."""


class ContractViolation(SearchError, AssertionError):
    """A game or caller broke the state contract (fatal)."""


class MoveNotFoundError(SearchError, ValueError):
    """Textual move input did not match any legal move."""

    def __init__(self, text: str, legal: list):
        self.text = text
        self.legal = legal
        super().__init__(f"Move not found: {text!r}")
