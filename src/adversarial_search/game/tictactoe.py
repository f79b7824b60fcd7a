from adversarial_search.game.game import Game, Keyed
from adversarial_search.engine.zobrist import get_zobrist_hasher


# Squares are numbered row by row:
#   0 1 2
#   3 4 5
#   6 7 8
FULL_BOARD = 0b111_111_111

WIN_LINES = (
    0b000_000_111, 0b000_111_000, 0b111_000_000,  # rows
    0b001_001_001, 0b010_010_010, 0b100_100_100,  # columns
    0b100_010_001, 0b001_010_100,                 # diagonals
)

_ZOBRIST = get_zobrist_hasher((2, 9))
SQUARE_KEYS = _ZOBRIST.keys
SIDE_KEY = _ZOBRIST.side_to_move_hash


def has_line(bits):
    """True if bits cover any winning line."""
    for line in WIN_LINES:
        if bits & line == line:
            return True
    return False


def iter_bits(bits):
    """Yield the indices of set bits, lowest first."""
    while bits:
        low = bits & -bits
        yield low.bit_length() - 1
        bits ^= low


class TicTacToe(Game, Keyed):
    """
    Noughts and crosses on a 3x3 board.

    Board: one bitboard per player, bit i set when square i is taken
    Moves: square index (0-8)
    X (turn 1) moves first
    """

    def __init__(self):
        self.board = [0, 0]
        self.moves = 0
        self.key = 0

    def __repr__(self):
        return f"TicTacToe(moves={self.moves}, x={self.board[0]:09b}, o={self.board[1]:09b})"

    def __eq__(self, other):
        if not isinstance(other, TicTacToe):
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
        if self.board[0] >> square & 1:
            return 'X'
        if self.board[1] >> square & 1:
            return 'O'
        return '.'

    def clone(self):
        other = TicTacToe.__new__(TicTacToe)
        other.board = list(self.board)
        other.moves = self.moves
        other.key = self.key
        return other

    def turn(self):
        return 1 if self.moves & 1 == 0 else -1

    def evaluate(self):
        if has_line(self.board[0]):
            return 1
        if has_line(self.board[1]):
            return -1
        return 0

    def is_terminal(self):
        return self.moves == 9 or self.evaluate() != 0

    def generate_moves(self, buffer):
        empty = ~(self.board[0] | self.board[1]) & FULL_BOARD
        buffer.extend(iter_bits(empty))

    def push(self, move):
        side = self.moves & 1
        self.board[side] |= 1 << move
        self.key ^= SQUARE_KEYS[side][move] ^ SIDE_KEY
        self.moves += 1

    def pop(self, move):
        self.moves -= 1
        side = self.moves & 1
        self.board[side] ^= 1 << move
        self.key ^= SQUARE_KEYS[side][move] ^ SIDE_KEY

    def action_space_size(self):
        return 9

    def hashkey(self):
        return self.key
