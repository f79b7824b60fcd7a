from abc import ABC, abstractmethod
from enum import Enum


class ToMove(Enum):
    """Which combination rule a search applies at a node."""
    MAX = 0
    MIN = 1
    CHANCE = 2


class Game(ABC):
    """
    Abstract Base Class for a game state searched by the engine.

    A state is mutable and is changed in place with push/pop. It must support
    value equality and a hash consistent with it: two equal states must have
    identical future move trees.
    """

    @abstractmethod
    def turn(self):
        """
        Returns +1 or -1 for the player to move.
        """
        pass

    @abstractmethod
    def evaluate(self):
        """
        Returns the result of the game (1 if the first player has won,
        -1 if the second player has won, 0 otherwise).
        """
        pass

    @abstractmethod
    def is_terminal(self):
        """
        Returns whether the game has ended.
        """
        pass

    @abstractmethod
    def generate_moves(self, buffer):
        """
        Appends every legal move to buffer. Never clears the buffer.
        """
        pass

    @abstractmethod
    def push(self, move):
        """
        Applies move in place.
        """
        pass

    @abstractmethod
    def pop(self, move):
        """
        Reverts move in place. Must be the most recently pushed move that has
        not been popped yet; this is not checked.
        """
        pass

    @abstractmethod
    def action_space_size(self):
        """
        Returns a capacity hint for move buffers.
        """
        pass

    @abstractmethod
    def clone(self):
        """
        Returns an independent copy of the state.
        """
        pass

    def to_move(self):
        """
        Classifies the node. Deterministic games map turn() to MAX/MIN.
        """
        return ToMove.MAX if self.turn() == 1 else ToMove.MIN

    def legal_moves(self):
        """
        Returns the legal moves in generation order as a new list.
        """
        buffer = []
        self.generate_moves(buffer)
        return buffer


class Keyed(ABC):
    """A state that can supply a 64-bit transposition key."""

    @abstractmethod
    def hashkey(self):
        """
        Returns a 64-bit key. Equal states give equal keys; distinct states
        may collide.
        """
        pass


class StochasticGame(ABC):
    """A state whose CHANCE nodes expose their outcome distribution."""

    @abstractmethod
    def generate_legal_moves_with_probabilities(self, buffer):
        """
        Appends (move, probability) pairs summing to 1.0. Only valid when
        to_move() is ToMove.CHANCE; raises ContractViolation otherwise.
        """
        pass


class PartiallySolvable(ABC):
    """A state with a heuristic leaf evaluation."""

    @abstractmethod
    def heuristic(self):
        """
        Returns a score from the first player's perspective. Terminal
        positions must score above any non-terminal position in magnitude.
        """
        pass


class played:
    """
    Scoped make/unmake: pushes move on enter and pops it on exit.

    The pop runs on every exit path, so a break or return inside the block
    cannot leave the state modified.
    """

    __slots__ = ('state', 'move')

    def __init__(self, state, move):
        self.state = state
        self.move = move

    def __enter__(self):
        self.state.push(self.move)
        return self.state

    def __exit__(self, exc_type, exc, tb):
        self.state.pop(self.move)
        return False
