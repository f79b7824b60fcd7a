"""
Unit tests for the bundled games.

Tests verify:
1. push/pop restores every reachable state exactly (and its hashkey)
2. Move generation at the starting positions
3. Win detection and terminal handling
4. Royal Game of Ur chance nodes and heuristic
"""

import random
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from adversarial_search.errors import ContractViolation
from adversarial_search.game import (
    GAMES, AdversarialKnight, ConnectFour, CoverMove, CoverTicTacToe, Keyed,
    RoyalGameOfUr, Size, TicTacToe, ToMove, create_game, played,
)
from adversarial_search.game.royal_ur import (
    Advance, Pass, Roll, FROM_POT, MATE_SCORE, OFF_BOARD, ROLL_PROBABILITIES,
)


def random_states(state, rng, plies):
    """Yield the states along a random line of play (the state is mutated)."""
    yield state
    for _ in range(plies):
        if state.is_terminal():
            return
        moves = state.legal_moves()
        if not moves:
            return
        state.push(rng.choice(moves))
        yield state


class TestMakeUnmake:
    """push(m) followed by pop(m) must restore the original state."""

    @pytest.mark.parametrize("name", sorted(GAMES))
    def test_round_trip_on_random_lines(self, name):
        rng = random.Random(1234)
        for _ in range(20):
            state = create_game(name)
            for node in random_states(state, rng, 60):
                before = node.clone()
                for move in node.legal_moves():
                    node.push(move)
                    node.pop(move)
                    assert node == before
                    assert hash(node) == hash(before)
                    if isinstance(node, Keyed):
                        assert node.hashkey() == before.hashkey()

    @pytest.mark.parametrize("name", sorted(GAMES))
    def test_unwinding_a_whole_line(self, name):
        rng = random.Random(99)
        state = create_game(name)
        start = state.clone()
        line = []
        for _ in range(40):
            if state.is_terminal():
                break
            move = rng.choice(state.legal_moves())
            state.push(move)
            line.append(move)
        for move in reversed(line):
            state.pop(move)
        assert state == start

    def test_played_pops_on_exception(self):
        state = TicTacToe()
        with pytest.raises(RuntimeError):
            with played(state, 4):
                assert state.moves == 1
                raise RuntimeError("boom")
        assert state == TicTacToe()

    def test_played_pops_on_break(self):
        state = TicTacToe()
        for move in state.legal_moves():
            with played(state, move):
                break
        assert state == TicTacToe()

    def test_generate_moves_appends(self):
        state = TicTacToe()
        buffer = ['sentinel']
        state.generate_moves(buffer)
        assert buffer[0] == 'sentinel'
        assert buffer[1:] == list(range(9))


class TestTicTacToe:

    def test_opening_moves(self):
        assert TicTacToe().legal_moves() == list(range(9))
        assert TicTacToe().action_space_size() == 9

    def test_row_win(self):
        state = TicTacToe()
        for move in (0, 3, 1, 4, 2):
            state.push(move)
        assert state.evaluate() == 1
        assert state.is_terminal()

    def test_second_player_win(self):
        state = TicTacToe()
        for move in (0, 2, 1, 4, 8, 6):
            state.push(move)
        assert state.evaluate() == -1
        assert state.is_terminal()

    def test_full_board_draw(self):
        state = TicTacToe()
        for move in (0, 1, 2, 4, 3, 5, 7, 6, 8):
            state.push(move)
        assert state.evaluate() == 0
        assert state.is_terminal()
        assert state.legal_moves() == []

    def test_turn_and_to_move(self):
        state = TicTacToe()
        assert state.turn() == 1
        assert state.to_move() is ToMove.MAX
        state.push(4)
        assert state.turn() == -1
        assert state.to_move() is ToMove.MIN

    def test_display(self):
        state = TicTacToe()
        state.push(4)
        state.push(0)
        assert str(state) == "O . .\n. X .\n. . .\n"

    def test_transposed_orders_share_key(self):
        a = TicTacToe()
        b = TicTacToe()
        for move in (0, 4, 8):
            a.push(move)
        for move in (8, 4, 0):
            b.push(move)
        assert a == b
        assert a.hashkey() == b.hashkey()


class TestCoverTicTacToe:

    def test_opening_moves(self):
        moves = CoverTicTacToe().legal_moves()
        assert len(moves) == 27
        assert moves[0] == CoverMove(0, Size.BIG)
        assert moves[-1] == CoverMove(8, Size.SMALL)

    def test_move_strings(self):
        assert str(CoverMove(4, Size.BIG)) == "B4"
        assert str(CoverMove(0, Size.MEDIUM)) == "M0"
        assert str(CoverMove(8, Size.SMALL)) == "S8"

    def test_bigger_piece_takes_square(self):
        state = CoverTicTacToe()
        state.push(CoverMove(4, Size.SMALL))   # X small in the centre
        state.push(CoverMove(4, Size.BIG))     # O covers it
        assert state.char_at(4) == 'b'
        assert state.owned(1) == 1 << 4
        assert state.owned(0) == 0
        # Nothing fits on a big piece
        assert all(move.square != 4 for move in state.legal_moves())

    def test_piece_supply(self):
        state = CoverTicTacToe()
        # X places three big pieces, O answers with small ones
        for x_square, o_square in ((0, 3), (4, 5), (7, 1)):
            state.push(CoverMove(x_square, Size.BIG))
            state.push(CoverMove(o_square, Size.SMALL))
        sizes = {move.size for move in state.legal_moves()}
        assert Size.BIG not in sizes

    def test_cover_line_wins(self):
        state = CoverTicTacToe()
        for move in (
            CoverMove(0, Size.SMALL), CoverMove(0, Size.MEDIUM),
            CoverMove(1, Size.SMALL), CoverMove(5, Size.SMALL),
            CoverMove(2, Size.SMALL), CoverMove(6, Size.SMALL),
        ):
            state.push(move)
        # O's medium covers X on square 0, so X's top row is broken
        assert state.evaluate() == 0
        state.push(CoverMove(0, Size.BIG))
        assert state.evaluate() == 1
        assert state.is_terminal()


class TestConnectFour:

    def test_opening_moves(self):
        assert ConnectFour().legal_moves() == list(range(7))

    def test_vertical_win(self):
        state = ConnectFour()
        for move in (3, 4, 3, 4, 3, 4, 3):
            state.push(move)
        assert state.evaluate() == 1
        assert state.is_terminal()

    def test_horizontal_win_for_second_player(self):
        state = ConnectFour()
        for move in (0, 1, 0, 2, 0, 3, 6, 4):
            state.push(move)
        assert state.evaluate() == -1

    def test_diagonal_win(self):
        state = ConnectFour()
        for move in (0, 1, 1, 2, 2, 3, 2, 3, 3, 6, 3):
            state.push(move)
        assert state.evaluate() == 1

    def test_no_wrap_around(self):
        state = ConnectFour()
        # X on columns 5, 6 and O filler, then X on 0, 1: not a line
        for move in (5, 5, 6, 6, 0, 0, 1):
            state.push(move)
        assert state.evaluate() == 0

    def test_full_column_not_generated(self):
        state = ConnectFour()
        for _ in range(6):
            state.push(0)
        assert 0 not in state.legal_moves()

    def test_action_space_follows_columns(self):
        state = ConnectFour(row_count=5, column_count=6)
        assert state.action_space_size() == 6
        assert len(state.legal_moves()) == 6
        assert set(vars(state)) == {'row_count', 'column_count', 'current', 'mask', 'moves'}

    def test_to_array(self):
        state = ConnectFour()
        state.push(3)
        state.push(3)
        board = state.to_array()
        assert board.shape == (6, 7)
        assert board[5, 3] == 1
        assert board[4, 3] == -1
        assert int(abs(board).sum()) == 2


class TestAdversarialKnight:

    def test_opening_moves(self):
        moves = AdversarialKnight().legal_moves()
        assert [m.dst for m in moves] == [17, 26, 42, 49]
        assert all(m.src == 32 for m in moves)

    def test_knight_returns_on_pop(self):
        state = AdversarialKnight()
        move = state.legal_moves()[0]
        state.push(move)
        assert state.knightloc == move.dst
        state.pop(move)
        assert state.knightloc == 32
        assert state == AdversarialKnight()

    def test_stuck_side_loses(self):
        state = AdversarialKnight(start=0)
        # Block both exits from the corner
        state.visited |= (1 << 10) | (1 << 17)
        assert state.legal_moves() == []
        assert state.evaluate() == -1
        assert state.is_terminal()

    def test_key_depends_on_knight_square(self):
        a = AdversarialKnight()
        b = AdversarialKnight()
        a.push(a.legal_moves()[0])
        b.push(b.legal_moves()[1])
        assert a.hashkey() != b.hashkey()


class TestRoyalGameOfUr:

    def test_start_is_chance_node(self):
        state = RoyalGameOfUr()
        assert state.to_move() is ToMove.CHANCE
        assert state.legal_moves() == [Roll(0), Roll(1), Roll(2), Roll(3), Roll(4)]

    def test_roll_distribution(self):
        outcomes = []
        RoyalGameOfUr().generate_legal_moves_with_probabilities(outcomes)
        assert [move for move, _ in outcomes] == [Roll(k) for k in range(5)]
        probabilities = [p for _, p in outcomes]
        assert sum(probabilities) == pytest.approx(1.0)
        assert probabilities == pytest.approx([1 / 16, 4 / 16, 6 / 16, 4 / 16, 1 / 16])
        assert ROLL_PROBABILITIES == pytest.approx((0.0625, 0.25, 0.375, 0.25, 0.0625))

    def test_distribution_on_non_chance_node_is_fatal(self):
        state = RoyalGameOfUr()
        state.push(Roll(2))
        with pytest.raises(ContractViolation):
            state.generate_legal_moves_with_probabilities([])

    def test_zero_roll_forces_pass(self):
        state = RoyalGameOfUr()
        state.push(Roll(0))
        assert state.legal_moves() == [Pass(0)]
        state.push(Pass(0))
        assert state.turn() == -1
        assert state.to_move() is ToMove.CHANCE

    def test_occupied_squares_block(self):
        state = RoyalGameOfUr()
        state.slots = [(1 << 0) | (1 << 1), 0]
        state.pots = [5, 7]
        state.push(Roll(1))
        assert state.legal_moves() == [Advance(1, 2, False, 1)]

    def test_blocked_roll_forces_pass(self):
        state = RoyalGameOfUr()
        state.slots = [1 << 6, 1 << 7]
        state.pots = [0, 6]
        state.push(Roll(1))
        assert state.legal_moves() == [Pass(1)]
        state.push(Pass(1))
        assert state.turn() == -1
        assert state.last_roll is None
        state.pop(Pass(1))
        assert state.turn() == 1
        assert state.last_roll == 1

    def test_entering_piece(self):
        state = RoyalGameOfUr()
        state.push(Roll(1))
        assert state.legal_moves() == [Advance(FROM_POT, 0, False, 1)]
        state.push(Advance(FROM_POT, 0, False, 1))
        assert state.pots == [6, 7]
        assert state.slots == [1, 0]
        assert state.turn() == -1

    def test_rosette_grants_another_turn(self):
        state = RoyalGameOfUr()
        state.push(Roll(4))
        state.push(Advance(FROM_POT, 3, False, 4))
        assert state.turn() == 1
        assert state.to_move() is ToMove.CHANCE

    def test_capture_on_shared_square(self):
        state = RoyalGameOfUr()
        state.slots = [1 << 5, 1 << 6]
        state.pots = [6, 6]
        state.push(Roll(1))
        capture = Advance(5, 6, True, 1)
        assert capture in state.legal_moves()
        state.push(capture)
        assert state.slots == [1 << 6, 0]
        assert state.pots == [6, 7]
        state.pop(capture)
        assert state.slots == [1 << 5, 1 << 6]
        assert state.pots == [6, 6]
        assert state.last_roll == 1

    def test_central_rosette_is_safe(self):
        state = RoyalGameOfUr()
        state.slots = [1 << 5, 1 << 7]
        state.pots = [0, 6]
        state.push(Roll(2))
        assert state.legal_moves() == [Pass(2)]

    def test_bear_off(self):
        state = RoyalGameOfUr()
        state.slots = [1 << 12, 1 << 4]
        state.pots = [0, 6]
        state.push(Roll(3))
        move = Advance(12, OFF_BOARD, False, 3)
        assert state.legal_moves() == [move]
        assert str(move) == "12-off"
        state.push(move)
        assert state.evaluate() == 1
        assert state.is_terminal()

    def test_display(self):
        state = RoyalGameOfUr()
        state.push(Roll(1))
        state.push(Advance(FROM_POT, 0, False, 1))
        assert str(state) == (
            ". . . X     . .\n"
            ". . . . . . . .\n"
            ". . . .     . .\n"
            "\n"
            "Move 2\n"
            "Roll: ? | Pots: 6 X, 7 O\n"
        )

    def test_heuristic_dominates_at_terminal_states(self):
        rng = random.Random(7)
        largest = 0
        for _ in range(30):
            state = RoyalGameOfUr()
            for node in random_states(state, rng, 400):
                if not node.is_terminal():
                    largest = max(largest, abs(node.heuristic()))

        won = RoyalGameOfUr()
        won.slots = [0, 1 << 4]
        won.pots = [0, 3]
        lost = RoyalGameOfUr()
        lost.slots = [1 << 4, 0]
        lost.pots = [3, 0]

        assert won.heuristic() == MATE_SCORE
        assert lost.heuristic() == -MATE_SCORE
        assert abs(won.heuristic()) > largest
        assert abs(lost.heuristic()) > largest

    def test_heuristic_is_absolute(self):
        state = RoyalGameOfUr()
        state.slots = [1 << 10, 0]
        state.pots = [6, 7]
        x_to_move = state.heuristic()
        state.moves = 1
        assert state.heuristic() == x_to_move
        assert x_to_move > 0


def test_create_game_rejects_unknown_names():
    with pytest.raises(ValueError):
        create_game("chess")
