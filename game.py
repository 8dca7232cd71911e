from __future__ import annotations

# Facade module that re-exports the Onet core.
# The Flask app, the CLI entry point and the tests import from here;
# single-responsibility modules live under onet_core/*.

from onet_core.board import Board, Coord, Tile, border_tile, tile_id  # noqa: F401
from onet_core.levels import (  # noqa: F401
    LEVEL_CONFIG,
    MAX_LEVEL,
    LevelConfig,
    all_levels,
    get_level_config,
    has_level,
)
from onet_core.pathfind import (  # noqa: F401
    DIRECTIONS,
    MAX_TURNS,
    ConnectablePair,
    ConnectResult,
    can_connect,
    count_turns,
    expand_path,
    find_connectable_pair,
    has_valid_moves,
)
from onet_core.deal import deal_board, deal_level_board  # noqa: F401
from onet_core.shuffle import (  # noqa: F401
    DEFAULT_MAX_ATTEMPTS,
    BoardStats,
    board_stats,
    fisher_yates,
    get_hint,
    needs_shuffle,
    shuffle_board_types,
    shuffle_until_solvable,
)
from onet_core.state import (  # noqa: F401
    LEVEL_COMPLETE,
    LOST,
    PAUSED,
    PLAYING,
    STATUSES,
    WON,
    Session,
)
from onet_core.session import (  # noqa: F401
    LEVEL_COMPLETION_BONUS,
    MATCH_SCORE,
    auto_shuffle_if_stuck,
    clear_selection,
    evaluate_selection,
    hint,
    initialize_board,
    is_stuck,
    new_game,
    next_level,
    pause_game,
    remove_tiles,
    reset_game,
    resolve_selection,
    resume_game,
    select_tile,
    shuffle_board,
    update_timer,
)
from onet_core.controller import (  # noqa: F401
    AUTO_SHUFFLE,
    MATCH,
    MISMATCH,
    DeferredAction,
    GameController,
)


def main() -> None:
    # CLI driver delegated to onet_core.cli
    from onet_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
