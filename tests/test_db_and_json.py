import json
import os
import random
import tempfile
import unittest

from game import (
    Board,
    EngineConfig,
    ResultRecord,
    ADD_NUMBERS,
    RESULTS_KEPT,
    new_session,
    attempt_match,
    use_tool,
    undo,
    serialize,
    deserialize,
    board_to_json,
    board_from_json,
    save_session,
    load_session,
    delete_session,
    append_result,
    recent_results,
    clear_results,
    outcomes,
)


def _record(n):
    return ResultRecord(mode='classic', score=n, result='lose', elapsed_time=n, move_count=n,
                        finished_at=f'2026-01-01T00:00:{n:02d}+00:00')


class TestJson(unittest.TestCase):
    def test_given_board_when_roundtrip_json_then_equal(self):
        board = Board.from_values([1, None, 19, 5])
        bj = board_to_json(board)
        self.assertEqual(bj['cols'], 9)
        self.assertEqual(len(bj['cells']), 9)
        self.assertEqual(board_from_json(bj), board)

    def test_given_played_session_when_serialized_then_identical_after_roundtrip(self):
        s = new_session('classic', config=EngineConfig(target_score=50), seed=4)
        use_tool(s, ADD_NUMBERS)
        s.selection.append(3)
        data = json.loads(json.dumps(serialize(s)))
        back = deserialize(data)
        self.assertEqual(back, s)
        self.assertEqual(back.config.target_score, 50)
        self.assertIsNotNone(back.snapshot)

        # the restored snapshot still undoes the add-numbers call
        self.assertEqual(undo(back).kind, outcomes.UNDONE)
        self.assertEqual(len(back.board), 27)
        self.assertEqual(back.supply_cursor, 8)

    def test_given_finished_session_when_roundtrip_then_terminal_fields_kept(self):
        s = new_session('chaotic', seed=2)
        s.board = Board.from_values([5, 5])
        s.score = 97
        attempt_match(s, 0, 1)
        back = deserialize(serialize(s))
        self.assertTrue(back.finished)
        self.assertEqual(back.result, 'win')
        self.assertEqual(back.end_reason, s.end_reason)

    def test_given_malformed_payload_when_deserializing_then_value_error(self):
        good = serialize(new_session('random', seed=1))
        for mutate in (
            lambda d: d.pop('board'),
            lambda d: d.update(mode='zen'),
            lambda d: d.update(selection=[0, 1, 2]),
            lambda d: d.update(finished=True, result=None),
            lambda d: d.update(toolQuotas={'addNumbers': 1}),
            lambda d: d['board'].update(cells=[1, 2, 3]),
        ):
            data = json.loads(json.dumps(good))
            mutate(data)
            with self.assertRaises(ValueError):
                deserialize(data)

    def test_given_non_mapping_payload_when_deserializing_then_value_error(self):
        for bad in ([1, 2, 3], 'session', None, 7):
            with self.assertRaises(ValueError):
                deserialize(bad)

    def test_given_non_int_cells_when_reading_board_then_value_error(self):
        for cell in (3.5, 3.0, '3', True):
            with self.assertRaises(ValueError):
                board_from_json({'cols': 9, 'cells': [cell] + [None] * 8})
        good = serialize(new_session('classic', seed=0))
        data = json.loads(json.dumps(good))
        data['board']['cells'][0] = 1.5
        with self.assertRaises(ValueError):
            deserialize(data)


class TestDb(unittest.TestCase):
    def test_given_saved_session_when_loaded_then_equal_with_elapsed(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, 'pairemup.db')
            s = new_session('random', seed=9)
            attempt_match(s, 0, 1)  # may or may not be valid; state is saved either way
            save_session(db_path, 'abc', s, elapsed=42)
            loaded = load_session(db_path, 'abc', rng=random.Random(1))
            self.assertIsNotNone(loaded)
            back, elapsed = loaded
            self.assertEqual(back, s)
            self.assertEqual(elapsed, 42)
            self.assertIsNone(load_session(db_path, 'missing'))
            self.assertTrue(delete_session(db_path, 'abc'))
            self.assertIsNone(load_session(db_path, 'abc'))

    def test_given_many_results_when_appending_then_newest_twenty_kept(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, 'deep', 'nest', 'results.db')
            for n in range(25):
                append_result(db_path, _record(n))
            records = recent_results(db_path)
            self.assertEqual(len(records), RESULTS_KEPT)
            self.assertEqual(records[0], _record(24))
            self.assertEqual(records[-1], _record(5))
            self.assertEqual(len(recent_results(db_path, limit=5)), 5)
            clear_results(db_path)
            self.assertEqual(recent_results(db_path), [])

    def test_given_record_when_to_dict_then_roundtrip(self):
        r = _record(7)
        d = r.to_dict()
        self.assertEqual(d['time'], '00:07')
        self.assertEqual(ResultRecord.from_dict(d), r)


if __name__ == '__main__':
    unittest.main(verbosity=2)
