"""
Configuration file for adversarial_search
"""

# Exact search configuration
SEARCH_CONFIG = {
    # Depth budget for exact solves. Must exceed the longest possible game,
    # otherwise depth-scaled scores stop meaning "plies until resolution".
    'solve_depth': 1000,

    # Transposition table size in megabytes
    'tt_size_mb': 16,

    # Extra interpreter frames reserved above the depth budget
    'recursion_margin': 200,

    # Engine depth in `play` when --depth is not given. Only tic-tac-toe is
    # small enough to solve exactly between moves.
    'play_depth': {
        'tictactoe': 1000,
        'cover': 4,
        'connect4': 6,
        'knight': 8,
    },
}

# Expectiminimax configuration
EXPECTI_CONFIG = {
    # Deterministic plies of lookahead (chance resolutions are free)
    'depth': 3,

    # Fixed-point scale for probability weights at chance nodes
    'probability_scale': 1 << 16,

    # Hard cap on the length of a sampled principal variation
    'max_plies': 2000,
}

# Perft configuration
PERFT_CONFIG = {
    # Nodes with remaining depth above this are memoized
    'cache_threshold': 3,

    # Deepest perft run by the driver
    'max_depth': 20,

    # Wall-clock budget for the driver, checked between depths
    'time_budget_s': 10.0,
}

# Logging configuration (used by the CLI)
LOGGING_CONFIG = {
    'level': 'WARNING',
    'format': '%(asctime)s %(name)s %(levelname)s: %(message)s',
}
