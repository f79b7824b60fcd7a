from enum import IntEnum
from typing import NamedTuple

from adversarial_search.game.game import Game, Keyed
from adversarial_search.game.tictactoe import FULL_BOARD, has_line, iter_bits
from adversarial_search.engine.zobrist import get_zobrist_hasher


PIECES_PER_SIZE = 3

_ZOBRIST = get_zobrist_hasher((3, 2, 9))
PIECE_KEYS = _ZOBRIST.keys
SIDE_KEY = _ZOBRIST.side_to_move_hash


class Size(IntEnum):
    BIG = 0
    MEDIUM = 1
    SMALL = 2


SIZE_CHARS = {Size.BIG: 'B', Size.MEDIUM: 'M', Size.SMALL: 'S'}


class CoverMove(NamedTuple):
    square: int
    size: Size

    def __str__(self):
        return f"{SIZE_CHARS[self.size]}{self.square}"


class CoverTicTacToe(Game, Keyed):
    """
    Tic-tac-toe where pieces come in three sizes and may cover smaller ones.

    Each player owns three big, three medium and three small pieces. A piece
    may be placed on any square whose pieces are all strictly smaller, and a
    square belongs to the owner of its topmost piece. Three owned squares in
    a line win. A player with no placement left draws the game.

    Board: bitboards indexed [size * 2 + side]
    Moves: CoverMove(square, size), written as 'B4', 'M0', 'S8'
    """

    def __init__(self):
        self.board = [0] * 6
        self.moves = 0
        self.key = 0

    def __repr__(self):
        return f"CoverTicTacToe(moves={self.moves}, board={self.board})"

    def __eq__(self, other):
        if not isinstance(other, CoverTicTacToe):
            return NotImplemented
        return self.board == other.board and self.moves == other.moves

    def __hash__(self):
        return self.key

    def __str__(self):
        rows = []
        for row in range(3):
            rows.append(" ".join(self.char_at(row * 3 + col) for col in range(3)))
        return "\n".join(rows) + "\n"

    def char_at(self, square):
        """Upper case for X, lower case for O, '.' when empty."""
        for size in Size:
            if self.board[size * 2] >> square & 1:
                return SIZE_CHARS[size]
            if self.board[size * 2 + 1] >> square & 1:
                return SIZE_CHARS[size].lower()
        return '.'

    def clone(self):
        other = CoverTicTacToe.__new__(CoverTicTacToe)
        other.board = list(self.board)
        other.moves = self.moves
        other.key = self.key
        return other

    def layer_bitmask(self, size):
        return self.board[size * 2] | self.board[size * 2 + 1]

    def owned(self, side):
        """Squares whose topmost piece belongs to side (0 = X, 1 = O)."""
        big = self.layer_bitmask(Size.BIG)
        medium = self.layer_bitmask(Size.MEDIUM)
        return (
            self.board[side]
            | (self.board[2 + side] & ~big)
            | (self.board[4 + side] & ~big & ~medium)
        )

    def _placements(self, size):
        side = self.moves & 1
        if bin(self.board[size * 2 + side]).count('1') >= PIECES_PER_SIZE:
            return 0
        blocked = 0
        for larger in range(size + 1):
            blocked |= self.layer_bitmask(larger)
        return ~blocked & FULL_BOARD

    def turn(self):
        return 1 if self.moves & 1 == 0 else -1

    def evaluate(self):
        if has_line(self.owned(0)):
            return 1
        if has_line(self.owned(1)):
            return -1
        return 0

    def is_terminal(self):
        if self.evaluate() != 0:
            return True
        return not any(self._placements(size) for size in Size)

    def generate_moves(self, buffer):
        for size in Size:
            for square in iter_bits(self._placements(size)):
                buffer.append(CoverMove(square, size))

    def push(self, move):
        side = self.moves & 1
        self.board[move.size * 2 + side] |= 1 << move.square
        self.key ^= PIECE_KEYS[move.size][side][move.square] ^ SIDE_KEY
        self.moves += 1

    def pop(self, move):
        self.moves -= 1
        side = self.moves & 1
        self.board[move.size * 2 + side] &= ~(1 << move.square)
        self.key ^= PIECE_KEYS[move.size][side][move.square] ^ SIDE_KEY

    def action_space_size(self):
        return 9 * 3

    def hashkey(self):
        return self.key
