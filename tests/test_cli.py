import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from pairemup_core.cli import main


class TestCli(unittest.TestCase):
    def _run(self, *lines, args=()):
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as td:
            argv = ['--db', os.path.join(td, 'pairemup.db'), '--seed', '1', *args]
            with mock.patch('builtins.input', side_effect=list(lines) + ['quit']), \
                    contextlib.redirect_stdout(out):
                main(argv)
        return out.getvalue()

    def test_given_same_cell_twice_when_matching_then_reported_as_invalid_pair(self):
        out = self._run('m 0 0')
        self.assertIn('Those cells do not form a pair.', out)

    def test_given_non_pair_when_matching_then_reported_as_invalid_pair(self):
        # classic deal starts 1, 2
        out = self._run('s 5', 'm 0 1')
        self.assertIn('Those cells do not form a pair.', out)
        self.assertEqual(out.count('Those cells do not form a pair.'), 1)

    def test_given_bad_index_or_text_when_matching_then_loop_continues(self):
        out = self._run('m 0 999', 'm a b', 'add')
        self.assertIn('Bad cell:', out)
        self.assertIn('Could not parse. Try again.', out)
        self.assertIn('add 9', out)


if __name__ == '__main__':
    unittest.main(verbosity=2)
