from typing import NamedTuple

from adversarial_search.game.game import Game, Keyed
from adversarial_search.engine.zobrist import get_zobrist_hasher


BOARD_SQUARES = 64
START_SQUARE = 32
KNIGHT_MOVE_OFFSETS = (-17, -15, -10, -6, 6, 10, 15, 17)

# [0][sq]: square visited, [1][sq]: knight standing on square
_ZOBRIST = get_zobrist_hasher((2, BOARD_SQUARES))
VISITED_KEYS = _ZOBRIST.keys[0]
KNIGHT_KEYS = _ZOBRIST.keys[1]


class KnightMove(NamedTuple):
    src: int
    dst: int

    def __str__(self):
        return str(self.dst)


class AdversarialKnight(Game, Keyed):
    """
    Two players take turns moving one shared knight around an 8x8 board.

    The knight may never return to a square it has already visited; the
    player who cannot move loses.
    """

    def __init__(self, start=START_SQUARE):
        self.knightloc = start
        self.moves = 0
        self.visited = 1 << start
        self.key = VISITED_KEYS[start] ^ KNIGHT_KEYS[start]

    def __repr__(self):
        return f"AdversarialKnight(knightloc={self.knightloc}, moves={self.moves})"

    def __eq__(self, other):
        if not isinstance(other, AdversarialKnight):
            return NotImplemented
        return (
            self.knightloc == other.knightloc
            and self.visited == other.visited
            and self.moves == other.moves
        )

    def __hash__(self):
        return self.key

    def __str__(self):
        lines = []
        for row in range(8):
            cells = []
            for col in range(8):
                square = row * 8 + col
                if square == self.knightloc:
                    cells.append('N')
                elif self.visited >> square & 1:
                    cells.append('x')
                else:
                    cells.append('.')
            lines.append(" ".join(cells))
        return "\n".join(lines) + "\n"

    def clone(self):
        other = AdversarialKnight.__new__(AdversarialKnight)
        other.__dict__.update(self.__dict__)
        return other

    def turn(self):
        return 1 if self.moves & 1 == 0 else -1

    def evaluate(self):
        # The side to move loses when the knight is stuck
        if not self.legal_moves():
            return -self.turn()
        return 0

    def is_terminal(self):
        return self.evaluate() != 0

    def generate_moves(self, buffer):
        src = self.knightloc
        for offset in KNIGHT_MOVE_OFFSETS:
            dst = src + offset
            # Column distance rules out moves that wrap around the board edge
            if 0 <= dst < BOARD_SQUARES and not self.visited >> dst & 1 and abs(dst % 8 - src % 8) <= 2:
                buffer.append(KnightMove(src, dst))

    def push(self, move):
        self.knightloc = move.dst
        self.visited |= 1 << move.dst
        self.key ^= VISITED_KEYS[move.dst] ^ KNIGHT_KEYS[move.src] ^ KNIGHT_KEYS[move.dst]
        self.moves += 1

    def pop(self, move):
        self.moves -= 1
        self.key ^= VISITED_KEYS[move.dst] ^ KNIGHT_KEYS[move.src] ^ KNIGHT_KEYS[move.dst]
        self.visited &= ~(1 << move.dst)
        self.knightloc = move.src

    def action_space_size(self):
        return 8

    def hashkey(self):
        return self.key
