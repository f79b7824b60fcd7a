"""
Unit tests for move selection and outcome helpers.

Tests verify:
1. best_move finds wins, blocks threats and breaks ties by generation order
2. Principal variations are played to the end and undone
3. Root move analysis is sorted for the side to move
4. Outcome classification and result strings
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from adversarial_search.errors import ContractViolation
from adversarial_search.game import ConnectFour, TicTacToe
from adversarial_search.engine.selection import analyse_root_moves, best_move, principal_variation, score_moves
from adversarial_search.engine.alphabeta import solve
from adversarial_search.engine.outcome import Outcome, describe_result, describe_terminal, eval_to_string, outcome_of


def play(state, moves):
    for move in moves:
        state.push(move)
    return state


class TestBestMove:

    def test_takes_immediate_win(self):
        state = play(TicTacToe(), [0, 3, 1, 4])
        assert best_move(state) == 2

    def test_blocks_threat(self):
        state = play(TicTacToe(), [0, 4, 1])
        assert best_move(state) == 2

    def test_ties_go_to_first_move(self):
        """Every opening move draws, so the first generated one is chosen."""
        assert best_move(TicTacToe()) == 0

    def test_prefers_fastest_win(self):
        """Winning now beats winning later."""
        state = play(TicTacToe(), [4, 1, 0, 2])
        scores = dict(score_moves(state, 100))
        assert best_move(state) == 8
        assert scores[8] > max(score for move, score in scores.items() if move != 8)

    def test_connect_four_vertical_threat(self):
        state = play(ConnectFour(), [3, 0, 3, 0, 3])
        # O must block the column
        assert best_move(state, 6) == 3

    def test_no_legal_moves(self):
        state = play(TicTacToe(), [0, 1, 2, 4, 3, 5, 7, 6, 8])
        assert best_move(state) is None

    def test_state_restored(self):
        state = play(TicTacToe(), [4])
        best_move(state)
        assert state == play(TicTacToe(), [4])


class TestPrincipalVariation:

    def test_forced_win_line(self):
        state = play(TicTacToe(), [4, 1])
        line = principal_variation(state)
        assert len(line) == 5
        assert state == play(TicTacToe(), [4, 1])

        play(state, line)
        assert state.is_terminal()
        assert state.evaluate() == 1

    def test_perfect_play_draws(self):
        state = TicTacToe()
        line = principal_variation(state)
        assert len(line) == 9
        assert state == TicTacToe()
        assert play(state, line).evaluate() == 0

    def test_terminal_position(self):
        state = play(TicTacToe(), [0, 3, 1, 4, 2])
        assert principal_variation(state) == []


class TestAnalyseRootMoves:

    def test_sorted_best_first_for_second_player(self):
        """After X takes the centre, corners draw and edges lose."""
        state = play(TicTacToe(), [4])
        results = analyse_root_moves(state)
        assert [move for move, _ in results] == [0, 2, 6, 8, 1, 3, 5, 7]
        assert [plies for _, plies in results] == [0, 0, 0, 0, 6, 6, 6, 6]
        assert state == play(TicTacToe(), [4])

    def test_plies_match_solve_convention(self):
        state = play(TicTacToe(), [4, 1])
        results = dict(analyse_root_moves(state))
        assert max(results.values()) == 5


class TestOutcome:

    @pytest.mark.parametrize("value,outcome", [
        (1, Outcome.FIRST_PLAYER_WIN),
        (-1, Outcome.SECOND_PLAYER_WIN),
        (0, Outcome.DRAW),
    ])
    def test_outcome_of(self, value, outcome):
        assert outcome_of(value) is outcome

    @pytest.mark.parametrize("value", [2, -3, 100])
    def test_outcome_of_rejects_other_values(self, value):
        with pytest.raises(ContractViolation):
            outcome_of(value)
        with pytest.raises(AssertionError):
            outcome_of(value)

    def test_eval_to_string(self):
        assert eval_to_string(0) == "draw"
        assert eval_to_string(5) == "first player wins in 5 plies"
        assert eval_to_string(-5) == "second player wins in 5 plies"
        assert eval_to_string(1) == "first player wins in 1 ply"

    def test_describe_terminal(self):
        assert describe_terminal(play(TicTacToe(), [0, 3, 1, 4, 2])) == "first player wins"
        assert describe_terminal(play(TicTacToe(), [0, 2, 1, 4, 8, 6])) == "second player wins"
        assert describe_terminal(play(TicTacToe(), [0, 1, 2, 4, 3, 5, 7, 6, 8])) == "draw"

    def test_describe_invalid_state(self):
        class Broken:
            def evaluate(self):
                return 7

        assert describe_terminal(Broken()) == "invalid state: evaluate() returned 7"

    def test_decided_root_is_not_reported_as_draw(self):
        """A won position solves to 0 plies but is described by its winner."""
        won = play(TicTacToe(), [0, 3, 1, 4, 2])
        score = solve(won)
        assert score == 0
        assert describe_result(won, score) == "first player wins"

        lost = play(TicTacToe(), [0, 2, 1, 4, 8, 6])
        assert describe_result(lost, solve(lost)) == "second player wins"

    def test_describe_result_open_positions(self):
        assert describe_result(TicTacToe(), 0) == "draw"
        assert describe_result(play(TicTacToe(), [4, 1]), 5) == "first player wins in 5 plies"
