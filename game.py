from __future__ import annotations

# Facade module that re-exports the Pair 'em Up engine.
# The Flask app, the CLI entry point and the tests import from here;
# single-responsibility modules live under pairemup_core/*.

try:
    from .pairemup_core.board import Board, Cell, COLS  # type: ignore
    from .pairemup_core.config import (  # type: ignore
        EngineConfig,
        ADD_NUMBERS,
        SHUFFLE,
        ERASER,
        TOOLS,
    )
    from .pairemup_core.deal import (  # type: ignore
        CLASSIC,
        RANDOM,
        CHAOTIC,
        MODES,
        POOL,
        deal_initial,
        draw_supply,
        supply_size,
    )
    from .pairemup_core.moves import (  # type: ignore
        are_connectable,
        values_match,
        is_valid_pair,
        match_gain,
        count_available_moves,
        find_all_pairs,
        format_available,
    )
    from .pairemup_core.state import (  # type: ignore
        GameSession,
        Snapshot,
        ResultRecord,
        RESULT_WIN,
        RESULT_LOSE,
        REASON_TARGET_REACHED,
        REASON_NO_MOVES,
        REASON_GRID_OVERFLOW,
        format_elapsed,
    )
    from .pairemup_core import outcomes  # type: ignore
    from .pairemup_core.outcomes import Outcome, Event, GAME_ENDED, SESSION_CHANGED  # type: ignore
    from .pairemup_core.lifecycle import evaluate_lifecycle, on_game_ended  # type: ignore
    from .pairemup_core.session import Hint, new_session, select_cell, attempt_match, hint  # type: ignore
    from .pairemup_core.tools import use_tool, undo  # type: ignore
    from .pairemup_core.codec import (  # type: ignore
        serialize,
        deserialize,
        board_to_json,
        board_from_json,
    )
    from .pairemup_core.db import (  # type: ignore
        RESULTS_KEPT,
        save_session,
        load_session,
        delete_session,
        append_result,
        recent_results,
        clear_results,
    )
except ImportError:
    from pairemup_core.board import Board, Cell, COLS  # type: ignore
    from pairemup_core.config import (  # type: ignore
        EngineConfig,
        ADD_NUMBERS,
        SHUFFLE,
        ERASER,
        TOOLS,
    )
    from pairemup_core.deal import (  # type: ignore
        CLASSIC,
        RANDOM,
        CHAOTIC,
        MODES,
        POOL,
        deal_initial,
        draw_supply,
        supply_size,
    )
    from pairemup_core.moves import (  # type: ignore
        are_connectable,
        values_match,
        is_valid_pair,
        match_gain,
        count_available_moves,
        find_all_pairs,
        format_available,
    )
    from pairemup_core.state import (  # type: ignore
        GameSession,
        Snapshot,
        ResultRecord,
        RESULT_WIN,
        RESULT_LOSE,
        REASON_TARGET_REACHED,
        REASON_NO_MOVES,
        REASON_GRID_OVERFLOW,
        format_elapsed,
    )
    from pairemup_core import outcomes  # type: ignore
    from pairemup_core.outcomes import Outcome, Event, GAME_ENDED, SESSION_CHANGED  # type: ignore
    from pairemup_core.lifecycle import evaluate_lifecycle, on_game_ended  # type: ignore
    from pairemup_core.session import Hint, new_session, select_cell, attempt_match, hint  # type: ignore
    from pairemup_core.tools import use_tool, undo  # type: ignore
    from pairemup_core.codec import (  # type: ignore
        serialize,
        deserialize,
        board_to_json,
        board_from_json,
    )
    from pairemup_core.db import (  # type: ignore
        RESULTS_KEPT,
        save_session,
        load_session,
        delete_session,
        append_result,
        recent_results,
        clear_results,
    )


def main() -> None:
    # CLI driver delegated to pairemup_core.cli
    try:
        from .pairemup_core.cli import main as _main  # type: ignore
    except ImportError:
        from pairemup_core.cli import main as _main  # type: ignore
    _main()


if __name__ == '__main__':
    main()
