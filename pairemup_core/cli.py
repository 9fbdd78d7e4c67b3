from __future__ import annotations

import argparse
import logging
import os
import time
import uuid
from typing import List, Optional

from . import outcomes
from .config import ADD_NUMBERS, ERASER, SHUFFLE
from .db import append_result, load_session, recent_results, save_session
from .deal import MODES
from .outcomes import GAME_ENDED, Outcome
from .session import attempt_match, hint, new_session, select_cell
from .state import GameSession
from .tools import undo, use_tool

HELP = """commands:
  s I        select cell I (second selection tries a match)
  m I J      match cells I and J
  add        add numbers
  shuffle    shuffle remaining numbers
  erase I    erase cell I
  undo       undo the last action
  hint       show available moves
  save       save the game
  quit       leave"""

_MESSAGES = {
    outcomes.INVALID_PAIR: 'Those cells do not form a pair.',
    outcomes.TOOL_EXHAUSTED: 'That tool is used up.',
    outcomes.GRID_OVERFLOW: 'Cannot add numbers: grid max rows reached.',
    outcomes.NOTHING_TO_UNDO: 'Nothing to undo.',
    outcomes.SESSION_FINISHED: 'The game is over.',
    outcomes.NOTHING_TO_ERASE: 'That cell is already empty.',
}


def _print_status(session: GameSession) -> None:
    print(session.board.pretty(session.selection))
    q = session.tool_quotas
    h = hint(session)
    print(f"score {session.score}/{session.config.target_score}  moves {session.move_count}  "
          f"add {q[ADD_NUMBERS]}  shuffle {q[SHUFFLE]}  eraser {q[ERASER]}  pairs {h.text}")


def _report(outcome: Outcome, db_path: str) -> None:
    if not outcome.ok:
        print(_MESSAGES.get(outcome.kind, outcome.kind))
        return
    if outcome.gained:
        print(f'+{outcome.gained}')
    ended = outcome.event(GAME_ENDED)
    if ended is not None:
        record = ended.payload
        append_result(db_path, record)
        print('You win!' if record.result == 'win' else 'Game over.')
        print(f'score {record.score}  time {record.time_text}  moves {record.move_count}')


def _print_results(db_path: str) -> None:
    records = recent_results(db_path, limit=5)
    if not records:
        print('No results yet.')
        return
    print(f"{'mode':<8} {'score':>5} {'result':<6} {'time':>5} {'moves':>5}")
    for r in records:
        print(f'{r.mode:<8} {r.score:>5} {r.result:<6} {r.time_text:>5} {r.move_count:>5}')


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Pair 'em Up number-matching puzzle")
    parser.add_argument('--mode', choices=list(MODES), default='classic', help='Game mode')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for deal, shuffle and supply')
    parser.add_argument('--db', default=os.getenv('PAIREMUP_DB', 'data/pairemup.db'), help='SQLite DB file path')
    parser.add_argument('--load', default=None, metavar='ID', help='Continue a saved game')
    parser.add_argument('--results', action='store_true', help='Show recent results and exit')
    args = parser.parse_args(argv)
    logging.basicConfig(level=os.getenv('PAIREMUP_LOG_LEVEL', 'WARNING').upper())

    if args.results:
        _print_results(args.db)
        return

    started = time.monotonic()
    offset = 0
    session_id = args.load or uuid.uuid4().hex[:8]
    session: Optional[GameSession] = None
    if args.load:
        loaded = load_session(args.db, args.load)
        if loaded is None:
            print(f'No saved game {args.load!r}.')
            return
        session, offset = loaded
    else:
        session = new_session(args.mode, seed=args.seed)
    session.elapsed_source = lambda: offset + int(time.monotonic() - started)

    print(f'{session.mode} game {session_id}. Type "help" for commands.')
    _print_status(session)
    while not session.finished:
        try:
            text = input('> ').strip()
        except EOFError:
            break
        parts = text.split()
        if not parts:
            continue
        cmd, rest = parts[0].lower(), parts[1:]
        try:
            nums = [int(t) for t in rest]
        except ValueError:
            print('Could not parse. Try again.')
            continue
        try:
            if cmd in ('q', 'quit'):
                break
            elif cmd == 'help':
                print(HELP)
                continue
            elif cmd == 's' and len(nums) == 1:
                outcome = select_cell(session, nums[0])
            elif cmd == 'm' and len(nums) == 2:
                outcome = attempt_match(session, nums[0], nums[1])
            elif cmd == 'add':
                outcome = use_tool(session, ADD_NUMBERS)
            elif cmd == 'shuffle':
                outcome = use_tool(session, SHUFFLE)
            elif cmd == 'erase' and len(nums) == 1:
                outcome = use_tool(session, ERASER, nums[0])
            elif cmd == 'undo':
                outcome = undo(session)
            elif cmd == 'hint':
                h = hint(session)
                print(f'available moves: {h.text}' + (f'  try {h.pair[0]} and {h.pair[1]}' if h.pair else ''))
                continue
            elif cmd == 'save':
                save_session(args.db, session_id, session, session.elapsed())
                print(f'Saved as {session_id}.')
                continue
            else:
                print('Unknown command. Type "help".')
                continue
        except IndexError as e:
            print(f'Bad cell: {e}')
            continue
        _report(outcome, args.db)
        _print_status(session)


if __name__ == '__main__':
    main()
