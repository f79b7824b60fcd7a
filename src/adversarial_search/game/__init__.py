# Game module

from .game import Game, Keyed, StochasticGame, PartiallySolvable, ToMove, played
from .tictactoe import TicTacToe
from .cover_tictactoe import CoverTicTacToe, CoverMove, Size
from .connect_four import ConnectFour
from .royal_ur import RoyalGameOfUr
from .adversarial_knight import AdversarialKnight, KnightMove

GAMES = {
    'tictactoe': TicTacToe,
    'cover': CoverTicTacToe,
    'connect4': ConnectFour,
    'ur': RoyalGameOfUr,
    'knight': AdversarialKnight,
}


def create_game(name):
    """Instantiate the starting position of a registered game."""
    try:
        return GAMES[name]()
    except KeyError:
        raise ValueError(f"Unknown game {name!r}, expected one of {sorted(GAMES)}") from None


__all__ = [
    'Game', 'Keyed', 'StochasticGame', 'PartiallySolvable', 'ToMove', 'played',
    'TicTacToe', 'CoverTicTacToe', 'CoverMove', 'Size', 'ConnectFour',
    'RoyalGameOfUr', 'AdversarialKnight', 'KnightMove',
    'GAMES', 'create_game',
]
