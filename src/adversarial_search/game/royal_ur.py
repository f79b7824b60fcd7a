"""
The Royal Game of Ur: a race game with dice and captures.

Each player races seven pieces along a fourteen-square track. Squares 0-3
and 12-13 are private to each player; squares 4-11 are shared, and landing on
an opponent piece there sends it back to its owner's pot. The throw is four
binary dice, so a move advances 0-4 squares. Landing on a rosette (3, 7, 13)
grants another turn, and a piece on the central rosette (7) cannot be
captured. Overshooting the last square bears the piece off. The first player
to bear off all seven pieces wins.

Dice throws are explicit pseudo-moves: at a CHANCE node the legal moves are
the five possible throws, after which the same player makes a deterministic
move (or a forced pass when no piece can move).
"""

from math import comb
from typing import NamedTuple, Optional

from adversarial_search.errors import ContractViolation
from adversarial_search.game.game import Game, PartiallySolvable, StochasticGame, ToMove
from adversarial_search.game.tictactoe import iter_bits


STARTING_PIECES = 7
NUM_DICE = 4
TRACK_LENGTH = 14
FROM_POT = 14
OFF_BOARD = 14
SHARED_SQUARES = range(4, 12)
ROSETTE_SQUARES = (3, 7, 13)
SAFE_ROSETTE = 7

# Binomial(4, 0.5): number of marked tips facing up
ROLL_PROBABILITIES = tuple(comb(NUM_DICE, k) / 2 ** NUM_DICE for k in range(NUM_DICE + 1))

MATE_SCORE = 1_000_000
IN_POT_PENALTY = 50
PROGRESS_SCORE = 100
FINISHING_SCORE = 2000


class Roll(NamedTuple):
    value: int

    def __str__(self):
        return f"roll {self.value}"


class Pass(NamedTuple):
    roll: int

    def __str__(self):
        return "pass"


class Advance(NamedTuple):
    src: int
    dst: int
    capture: bool
    roll: int

    def __str__(self):
        src = "p" if self.src == FROM_POT else str(self.src)
        dst = "off" if self.dst == OFF_BOARD else str(self.dst)
        return f"{src}-{dst}"


class RoyalGameOfUr(Game, StochasticGame, PartiallySolvable):
    """
    Royal Game of Ur state.

    Attributes:
        slots: Occupied track squares per side, as bitmasks [X, O]
        pots: Pieces not yet entered per side [X, O]
        moves: Number of turn changes so far (parity gives the side to move)
        last_roll: Pending throw, or None at a CHANCE node
    """

    def __init__(self):
        self.slots = [0, 0]
        self.pots = [STARTING_PIECES, STARTING_PIECES]
        self.moves = 0
        self.last_roll: Optional[int] = None

    def __repr__(self):
        return (
            f"RoyalGameOfUr(slots=[{self.slots[0]:014b}, {self.slots[1]:014b}], "
            f"pots={self.pots}, moves={self.moves}, last_roll={self.last_roll})"
        )

    def __eq__(self, other):
        if not isinstance(other, RoyalGameOfUr):
            return NotImplemented
        return (
            self.slots == other.slots
            and self.pots == other.pots
            and self.moves == other.moves
            and self.last_roll == other.last_roll
        )

    def __hash__(self):
        return hash((self.slots[0], self.slots[1], self.pots[0], self.pots[1], self.moves, self.last_roll))

    def clone(self):
        other = RoyalGameOfUr.__new__(RoyalGameOfUr)
        other.slots = list(self.slots)
        other.pots = list(self.pots)
        other.moves = self.moves
        other.last_roll = self.last_roll
        return other

    def _occupied(self, side, square):
        return self.slots[side] >> square & 1 == 1

    def _char(self, side, square):
        if self._occupied(side, square):
            return 'X' if side == 0 else 'O'
        return '.'

    def __str__(self):
        # Private squares run right to left (3..0) then (13, 12) on the outer
        # rows; the middle row is the shared lane 4..11.
        outer = (3, 2, 1, 0)
        finish = (13, 12)
        lines = []
        for side in (0, 1):
            start = " ".join(self._char(side, sq) for sq in outer)
            end = " ".join(self._char(side, sq) for sq in finish)
            lines.append(f"{start}     {end}")
        middle = []
        for sq in SHARED_SQUARES:
            if self._occupied(0, sq):
                middle.append('X')
            elif self._occupied(1, sq):
                middle.append('O')
            else:
                middle.append('.')
        lines.insert(1, " ".join(middle))
        roll = '?' if self.last_roll is None else str(self.last_roll)
        lines.append("")
        lines.append(f"Move {self.moves + 1}")
        lines.append(f"Roll: {roll} | Pots: {self.pots[0]} X, {self.pots[1]} O")
        return "\n".join(lines) + "\n"

    def turn(self):
        return 1 if self.moves & 1 == 0 else -1

    def to_move(self):
        if self.last_roll is None:
            return ToMove.CHANCE
        return ToMove.MAX if self.turn() == 1 else ToMove.MIN

    def evaluate(self):
        if self.pots[0] == 0 and self.slots[0] == 0:
            return 1
        if self.pots[1] == 0 and self.slots[1] == 0:
            return -1
        return 0

    def is_terminal(self):
        return self.evaluate() != 0

    def _can_land(self, side, dst):
        if dst == OFF_BOARD:
            return True
        if self._occupied(side, dst):
            return False
        if dst == SAFE_ROSETTE and self._occupied(1 - side, dst):
            return False
        return True

    def _captures(self, side, dst):
        return dst in SHARED_SQUARES and self._occupied(1 - side, dst)

    def generate_moves(self, buffer):
        roll = self.last_roll
        if roll is None:
            for value in range(NUM_DICE + 1):
                buffer.append(Roll(value))
            return

        side = self.moves & 1
        generated = len(buffer)
        if roll > 0:
            for src in iter_bits(self.slots[side]):
                dst = min(src + roll, OFF_BOARD)
                if self._can_land(side, dst):
                    buffer.append(Advance(src, dst, self._captures(side, dst), roll))
            if self.pots[side] > 0:
                dst = roll - 1
                if self._can_land(side, dst):
                    buffer.append(Advance(FROM_POT, dst, False, roll))

        # A player who cannot move must still hand over the turn
        if len(buffer) == generated:
            buffer.append(Pass(roll))

    def generate_legal_moves_with_probabilities(self, buffer):
        if self.to_move() is not ToMove.CHANCE:
            raise ContractViolation(
                "generate_legal_moves_with_probabilities called on a non-chance node"
            )
        for value, probability in enumerate(ROLL_PROBABILITIES):
            buffer.append((Roll(value), probability))

    def push(self, move):
        if isinstance(move, Roll):
            self.last_roll = move.value
            return

        side = self.moves & 1
        if isinstance(move, Advance):
            if move.src == FROM_POT:
                self.pots[side] -= 1
            else:
                self.slots[side] &= ~(1 << move.src)
            if move.dst != OFF_BOARD:
                self.slots[side] |= 1 << move.dst
            if move.capture:
                self.slots[1 - side] &= ~(1 << move.dst)
                self.pots[1 - side] += 1
            if move.dst not in ROSETTE_SQUARES:
                self.moves += 1
        else:
            self.moves += 1
        self.last_roll = None

    def pop(self, move):
        if isinstance(move, Roll):
            self.last_roll = None
            return

        if isinstance(move, Advance):
            if move.dst not in ROSETTE_SQUARES:
                self.moves -= 1
            side = self.moves & 1
            if move.capture:
                self.slots[1 - side] |= 1 << move.dst
                self.pots[1 - side] -= 1
            if move.dst != OFF_BOARD:
                self.slots[side] &= ~(1 << move.dst)
            if move.src == FROM_POT:
                self.pots[side] += 1
            else:
                self.slots[side] |= 1 << move.src
            self.last_roll = move.roll
        else:
            self.moves -= 1
            self.last_roll = move.roll

    def action_space_size(self):
        return 21

    def heuristic(self):
        if self.is_terminal():
            return self.evaluate() * MATE_SCORE

        # Pieces further along the track are worth more, pieces still in the
        # pot are a liability, and borne-off pieces are worth the most.
        score = 0
        for square in iter_bits(self.slots[0]):
            score += square * PROGRESS_SCORE
        for square in iter_bits(self.slots[1]):
            score -= square * PROGRESS_SCORE
        score -= self.pots[0] * IN_POT_PENALTY
        score += self.pots[1] * IN_POT_PENALTY
        on_board = [bin(bits).count('1') for bits in self.slots]
        finished_x = STARTING_PIECES - on_board[0] - self.pots[0]
        finished_o = STARTING_PIECES - on_board[1] - self.pots[1]
        score += finished_x * FINISHING_SCORE
        score -= finished_o * FINISHING_SCORE
        return score
