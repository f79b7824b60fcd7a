import numpy as np
from adversarial_search.game.game import Game, Keyed


class ConnectFour(Game, Keyed):
    """
    Connect Four (Four in a Row) game implementation.

    Board: 6 rows x 7 columns
    Win condition: 4 in a row (horizontal, vertical, or diagonal)
    Actions: Column index (0-6) - disc drops to lowest empty row

    Position is stored as two bitboards with one column of (rows + 1) bits
    per board column, the extra bit acting as a sentinel:

        .  .  .  .  .  .  .
        5 12 19 26 33 40 47
        4 11 18 25 32 39 46
        3 10 17 24 31 38 45
        2  9 16 23 30 37 44
        1  8 15 22 29 36 43
        0  7 14 21 28 35 42

    - mask: 1 on every occupied cell
    - current: 1 on the stones of the player to move
    """

    def __init__(self, row_count=6, column_count=7):
        self.row_count = row_count
        self.column_count = column_count
        self.current = 0
        self.mask = 0
        self.moves = 0

    def __repr__(self):
        return f"ConnectFour({self.row_count}x{self.column_count}, moves={self.moves})"

    def __eq__(self, other):
        if not isinstance(other, ConnectFour):
            return NotImplemented
        return (
            self.row_count == other.row_count
            and self.column_count == other.column_count
            and self.current == other.current
            and self.mask == other.mask
        )

    def __hash__(self):
        return self.hashkey()

    def __str__(self):
        symbols = {1: 'X', -1: 'O', 0: '.'}
        board = self.to_array()
        lines = [" ".join(str(col) for col in range(self.column_count))]
        for row in board:
            lines.append(" ".join(symbols[int(cell)] for cell in row))
        return "\n".join(lines) + "\n"

    def clone(self):
        other = ConnectFour.__new__(ConnectFour)
        other.__dict__.update(self.__dict__)
        return other

    def _bottom_mask(self, column):
        return 1 << (column * (self.row_count + 1))

    def _top_mask(self, column):
        return 1 << (self.row_count - 1 + column * (self.row_count + 1))

    def _column_mask(self, column):
        return ((1 << self.row_count) - 1) << (column * (self.row_count + 1))

    def _stones(self, player):
        """Bitboard of the first (player=1) or second (player=-1) player's stones."""
        if player == self.turn():
            return self.current
        return self.current ^ self.mask

    def has_alignment(self, position):
        """
        Check a bitboard for 4 in a row.

        Shifting by 1 follows a column, by rows+1 a row, and by rows / rows+2
        the two diagonals.
        """
        for shift in (1, self.row_count, self.row_count + 1, self.row_count + 2):
            pairs = position & (position >> shift)
            if pairs & (pairs >> (2 * shift)):
                return True
        return False

    def to_array(self):
        """
        Board as a (rows, cols) array, top row first, 1 for the first
        player, -1 for the second player and 0 for empty cells.
        """
        state = np.zeros((self.row_count, self.column_count), dtype=np.int8)
        first = self._stones(1)
        second = self._stones(-1)
        for column in range(self.column_count):
            for row in range(self.row_count):
                bit = 1 << (row + column * (self.row_count + 1))
                if first & bit:
                    state[self.row_count - 1 - row, column] = 1
                elif second & bit:
                    state[self.row_count - 1 - row, column] = -1
        return state

    def turn(self):
        return 1 if self.moves & 1 == 0 else -1

    def evaluate(self):
        # Only the player who just moved can have completed a line
        if self.moves and self.has_alignment(self.current ^ self.mask):
            return -self.turn()
        return 0

    def is_terminal(self):
        return self.moves == self.row_count * self.column_count or self.evaluate() != 0

    def generate_moves(self, buffer):
        for column in range(self.column_count):
            if self.mask & self._top_mask(column) == 0:
                buffer.append(column)

    def push(self, move):
        self.current ^= self.mask
        self.mask |= self.mask + self._bottom_mask(move)
        self.moves += 1

    def pop(self, move):
        column_bits = self.mask & self._column_mask(move)
        self.mask ^= 1 << (column_bits.bit_length() - 1)
        self.current ^= self.mask
        self.moves -= 1

    def action_space_size(self):
        return self.column_count

    def hashkey(self):
        # current + mask is unique per position
        return self.current + self.mask
