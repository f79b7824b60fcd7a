#!/usr/bin/env python3
"""
Command line interface: solve, analyse, perft and play the bundled games.

Usage:
    adversarial-search solve tictactoe
    adversarial-search analyse cover --depth 1000
    adversarial-search perft ur --max-depth 8 --time-budget 5
    adversarial-search expecti ur --depth 3
    adversarial-search play tictactoe
"""

import argparse
import logging
import random
import sys
import time

from adversarial_search.config import EXPECTI_CONFIG, LOGGING_CONFIG, PERFT_CONFIG, SEARCH_CONFIG
from adversarial_search.errors import MoveNotFoundError
from adversarial_search.game import GAMES, Keyed, StochasticGame, ToMove, create_game
from adversarial_search.engine import (
    analyse_root_moves, best_move, describe_result, describe_terminal, eval_to_string,
    expecti_best_move, expectiminimax, perft_test, sample_chance, solve_tt, solve,
)


def parse_move(state, text):
    """
    Match textual input against the legal moves by their string form.

    Raises:
        MoveNotFoundError: no legal move prints as text
    """
    text = text.strip()
    legal = state.legal_moves()
    for move in legal:
        if str(move) == text:
            return move
    raise MoveNotFoundError(text, legal)


def cmd_solve(args):
    state = create_game(args.game)
    start = time.perf_counter()
    if isinstance(state, Keyed) and not args.no_tt:
        score = solve_tt(state, args.depth, deep=args.deep_tt)
    else:
        score = solve(state, args.depth)
    elapsed = time.perf_counter() - start
    print(f"{args.game}: {describe_result(state, score)} (score {score}, {elapsed:.2f}s)")
    return 0


def cmd_analyse(args):
    state = create_game(args.game)
    print(f"{args.game} opening move evaluations (best first for the side to move):")
    for move, score in analyse_root_moves(state, args.depth, progress=True):
        print(f"  move {move}: {eval_to_string(score)}")
    return 0


def cmd_perft(args):
    state = create_game(args.game)
    print(f"Perft testing {args.game}")
    for result in perft_test(state, args.max_depth, args.time_budget):
        print(
            f"  depth {result.depth:>2}: {result.nodes:>14,} nodes "
            f"in {result.elapsed_s:7.3f}s ({result.nodes_per_second:,.0f} nodes/sec)"
        )
    return 0


def cmd_expecti(args):
    state = create_game(args.game)
    if not isinstance(state, StochasticGame):
        print(f"{args.game} has no chance nodes", file=sys.stderr)
        return 2
    for depth in range(1, args.depth + 1):
        start = time.perf_counter()
        value = expectiminimax(state, depth)
        elapsed = time.perf_counter() - start
        print(f"eval {value} at depth {depth}, done in {elapsed:.1f}s")
    return 0


def engine_move(state, depth, rng):
    if isinstance(state, StochasticGame):
        return expecti_best_move(state, depth, rng)
    return best_move(state, depth)


def play_depth(args, state):
    """Engine depth for `play`: --depth, else the per-game default."""
    if args.depth is not None:
        return args.depth
    if isinstance(state, StochasticGame):
        return EXPECTI_CONFIG['depth']
    return SEARCH_CONFIG['play_depth'].get(args.game, SEARCH_CONFIG['solve_depth'])


def cmd_play(args, input_fn=input):
    state = create_game(args.game)
    rng = random.Random(args.seed)
    depth = play_depth(args, state)
    engine_side = 1 if args.engine_first else -1

    while not state.is_terminal():
        print(state)
        if state.to_move() is ToMove.CHANCE:
            move = sample_chance(state, rng)
            print(f"dice: {move}")
            state.push(move)
            continue

        if state.turn() == engine_side:
            move = engine_move(state, depth, rng)
            print(f"computer plays {move}")
            state.push(move)
            continue

        print("legal moves: " + ", ".join(str(m) for m in state.legal_moves()))
        text = input_fn("your move ('q' to quit): ")
        if text.strip().lower() == 'q':
            return 0
        try:
            move = parse_move(state, text)
        except MoveNotFoundError:
            print("Move not found.")
            continue
        state.push(move)

    print(state)
    print(describe_terminal(state))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="adversarial-search", description=__doc__.splitlines()[1])
    parser.add_argument('-v', '--verbose', action='count', default=0, help="Increase log verbosity")
    sub = parser.add_subparsers(dest='command', required=True)

    solve_parser = sub.add_parser('solve', help="Solve a game from its starting position")
    solve_parser.add_argument('game', choices=sorted(GAMES))
    solve_parser.add_argument('--depth', type=int, default=SEARCH_CONFIG['solve_depth'])
    solve_parser.add_argument('--no-tt', action='store_true', help="Plain negamax without a table")
    solve_parser.add_argument('--deep-tt', action='store_true', help="Use the table in the whole tree")
    solve_parser.set_defaults(func=cmd_solve)

    analyse_parser = sub.add_parser('analyse', help="Solve every opening move")
    analyse_parser.add_argument('game', choices=sorted(GAMES))
    analyse_parser.add_argument('--depth', type=int, default=SEARCH_CONFIG['solve_depth'])
    analyse_parser.set_defaults(func=cmd_analyse)

    perft_parser = sub.add_parser('perft', help="Count nodes at increasing depths")
    perft_parser.add_argument('game', choices=sorted(GAMES))
    perft_parser.add_argument('--max-depth', type=int, default=PERFT_CONFIG['max_depth'])
    perft_parser.add_argument('--time-budget', type=float, default=PERFT_CONFIG['time_budget_s'])
    perft_parser.set_defaults(func=cmd_perft)

    expecti_parser = sub.add_parser('expecti', help="Expectiminimax at increasing depths")
    expecti_parser.add_argument('game', choices=sorted(GAMES))
    expecti_parser.add_argument('--depth', type=int, default=EXPECTI_CONFIG['depth'])
    expecti_parser.set_defaults(func=cmd_expecti)

    play_parser = sub.add_parser('play', help="Play against the engine")
    play_parser.add_argument('game', choices=sorted(GAMES))
    play_parser.add_argument('--depth', type=int, default=None)
    play_parser.add_argument('--engine-first', action='store_true', help="Engine plays the first player")
    play_parser.add_argument('--seed', type=int, default=None, help="Seed for dice and random choices")
    play_parser.set_defaults(func=cmd_play)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    level = LOGGING_CONFIG['level']
    if args.verbose == 1:
        level = 'INFO'
    elif args.verbose > 1:
        level = 'DEBUG'
    logging.basicConfig(level=level, format=LOGGING_CONFIG['format'])

    try:
        return args.func(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
