import os
import tempfile
import unittest

from click.testing import CliRunner

from note_drill.main import describe_step, main, parse_position
from note_drill.note_types import Position
from note_drill.stats import JsonStatsStore


class TestHelpers(unittest.TestCase):
    def test_describe_step(self):
        self.assertEqual(describe_step(0), "bottom line")
        self.assertEqual(describe_step(1), "space above the bottom line")
        self.assertEqual(describe_step(8), "top line")
        self.assertEqual(describe_step(-2), "2 step(s) below the bottom line")
        self.assertEqual(describe_step(11), "3 step(s) above the top line")

    def test_parse_position(self):
        self.assertEqual(parse_position("6 3"), Position(6, 3))
        self.assertEqual(parse_position("2,12"), Position(2, 12))
        self.assertIsNone(parse_position("six three"))
        self.assertIsNone(parse_position("1"))


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.stats_file = os.path.join(self.tmp.name, "stats.json")
        self.runner = CliRunner()

    def tearDown(self):
        self.tmp.cleanup()

    def invoke(self, *args, input=None):
        return self.runner.invoke(main, ["--config-dir", self.tmp.name, *args], input=input)

    def test_staff(self):
        result = self.invoke("staff", "C4")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("C4: step -2", result.output)
        self.assertIn("Ledger lines: [-2]", result.output)
        self.assertIn("Frequency: 261.63 Hz", result.output)

    def test_staff_from_frequency(self):
        result = self.invoke("staff", "440")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("A4: step 3", result.output)
        self.assertIn("Frequency: 440.00 Hz", result.output)

    def test_staff_rejects_non_positive_frequency(self):
        self.assertEqual(self.invoke("staff", "0").exit_code, 2)

    def test_staff_accidental(self):
        result = self.invoke("staff", "Bb4")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Accidental: flat", result.output)

    def test_staff_rejects_bad_pitch(self):
        result = self.invoke("staff", "H9")
        self.assertEqual(result.exit_code, 2)

    def test_positions(self):
        result = self.invoke("positions", "Gb")
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.strip().splitlines()
        self.assertEqual(lines[0], "string 1 fret 2")
        self.assertIn("string 6 fret 2", lines)

    def test_positions_ukulele(self):
        result = self.invoke("positions", "C", "--instrument", "ukulele")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("string 3 fret 0", result.output)

    def test_positions_rejects_bad_class(self):
        self.assertEqual(self.invoke("positions", "H").exit_code, 2)

    def test_treble_drill_retries_until_correct(self):
        naturals = "C\nD\nE\nF\nG\nA\nB\n"
        result = self.invoke(
            "drill", "--seed", "3", "--rounds", "2", "--stats-file", self.stats_file,
            input=naturals * 2,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Treble staff: note on the", result.output)
        self.assertIn("Final score: 2 /", result.output)
        self.assertNotIn("Stopped.", result.output)
        progress = JsonStatsStore(self.stats_file).load("treble")
        self.assertEqual(progress.total_correct, 2)
        self.assertGreaterEqual(progress.total_attempts, 2)

    def test_treble_drill_skip(self):
        result = self.invoke(
            "drill", "--seed", "3", "--rounds", "1", "--stats-file", self.stats_file,
            input="next\n",
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("It was ", result.output)
        self.assertNotIn("Stopped.", result.output)
        self.assertIn("Final score: 0 / 0", result.output)

    def test_stats_file_defaults_to_config_dir(self):
        result = self.invoke("drill", "--rounds", "1", input="C\nD\nE\nF\nG\nA\nB\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(JsonStatsStore(self.stats_file).load("treble").total_correct, 1)

        result = self.invoke("stats")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("treble: 1/", result.output)

    def test_guitar_drill_retries_bad_input(self):
        result = self.invoke(
            "drill", "--trainer", "guitar", "--seed", "5", "--rounds", "1",
            "--stats-file", self.stats_file,
            input="nonsense\n6 0\n",
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Enter a string and a fret", result.output)
        self.assertIn("Positions:", result.output)
        self.assertIn("/ 1", result.output)

    def test_hard_timed_ukulele_drill(self):
        result = self.invoke(
            "drill", "-t", "ukulele", "--hard", "--timed", "--seed", "8", "--rounds", "1",
            "--stats-file", self.stats_file,
            input="1 0\n2 0\n3 0\n4 0\n",
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Find it on string", result.output)
        self.assertIn("Time remaining", result.output)

    def test_drill_stops_at_end_of_input(self):
        result = self.invoke("drill", "--stats-file", self.stats_file, input="")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Stopped.", result.output)
        self.assertIn("Final score: 0 / 0", result.output)

    def test_stats(self):
        JsonStatsStore(self.stats_file).record_result("guitar", True, 4)
        result = self.invoke("stats", "--stats-file", self.stats_file)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("guitar: 1/1 correct (100%), best streak 4", result.output)
        self.assertIn("treble: 0/0 correct (0%), best streak 0", result.output)


if __name__ == "__main__":
    unittest.main()
