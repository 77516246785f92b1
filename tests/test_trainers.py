import unittest

from note_drill.core.countdown import ManualCountdown
from note_drill.fretboard import GUITAR_TUNING, UKULELE_TUNING, all_positions, positions_for_pitch_class
from note_drill.note_types import NATURAL_PITCH_CLASSES, DrillTarget, Pitch, Position
from note_drill.note_utils import pitch_class_of
from note_drill.random_source import SeededRandom
from note_drill.trainers import (
    GUITAR,
    UKULELE,
    FretboardTrainer,
    choice_options,
    easy_pool,
    evaluate_pitch_class_answer,
    fretboard_trainer,
    hard_pool,
    make_fretboard_evaluator,
    treble_session,
)


class TestTrebleTrainer(unittest.TestCase):
    def test_pitch_class_answers(self):
        self.assertTrue(evaluate_pitch_class_answer(Pitch("C", 4), "C")["correct"])
        self.assertTrue(evaluate_pitch_class_answer(Pitch("C#", 4), "Db")["correct"])
        self.assertFalse(evaluate_pitch_class_answer(Pitch("C", 4), "D")["correct"])
        self.assertEqual(
            evaluate_pitch_class_answer(Pitch("Db", 5), "C#")["canonical"], Pitch("C#", 5)
        )

    def test_choice_options(self):
        rng = SeededRandom(11)
        for target in (Pitch("E", 4), Pitch("B", 5), Pitch("C#", 4)):
            options = choice_options(rng, target)
            self.assertEqual(len(options), 4)
            self.assertEqual(len(set(options)), 4)
            self.assertIn(pitch_class_of(target), options)
            distractors = [o for o in options if o != pitch_class_of(target)]
            for option in distractors:
                self.assertIn(option, NATURAL_PITCH_CLASSES)

    def test_session_uses_natural_scope(self):
        session = treble_session(seed=5, countdown_factory=ManualCountdown)
        self.assertEqual(len(session.pool), 14)
        target = session.current_target
        result = session.submit_answer(target.name)
        self.assertTrue(result["correct"])


class TestPools(unittest.TestCase):
    def test_easy_pool_has_each_class_once(self):
        pool = easy_pool(GUITAR_TUNING)
        self.assertEqual(len(pool), 12)
        self.assertEqual(len({target.pitch.name for target in pool}), 12)
        self.assertEqual(pool[0], DrillTarget(Pitch("E", 2)))
        self.assertTrue(all(target.required_position is None for target in pool))

    def test_hard_pool_pins_positions(self):
        pool = hard_pool(GUITAR_TUNING)
        self.assertEqual(len(pool), 6 * 12)
        self.assertEqual(pool[0], DrillTarget(Pitch("E", 4), Position(1, 0)))
        self.assertIn(DrillTarget(Pitch("C", 3), Position(5, 3)), pool)
        self.assertEqual(len(hard_pool(UKULELE_TUNING)), 4 * 12)

    def test_ukulele_easy_pool(self):
        pool = easy_pool(UKULELE_TUNING)
        self.assertEqual([t.pitch for t in pool][:3], [Pitch("C", 4), Pitch("C#", 4), Pitch("D", 4)])


class TestFretboardEvaluator(unittest.TestCase):
    def setUp(self):
        self.evaluate = make_fretboard_evaluator(GUITAR_TUNING)

    def test_any_position_of_the_class(self):
        target = DrillTarget(Pitch("E", 2))
        self.assertTrue(self.evaluate(target, Position(1, 0))["correct"])
        self.assertTrue(self.evaluate(target, Position(2, 5))["correct"])
        self.assertFalse(self.evaluate(target, Position(1, 1))["correct"])
        self.assertEqual(
            self.evaluate(target, Position(1, 0))["positions"],
            positions_for_pitch_class(GUITAR_TUNING, "E"),
        )

    def test_plain_pitch_target(self):
        self.assertTrue(self.evaluate(Pitch("Gb", 3), Position(6, 2))["correct"])

    def test_required_position(self):
        target = DrillTarget(Pitch("E", 2), Position(6, 0))
        self.assertTrue(self.evaluate(target, Position(6, 0))["correct"])
        result = self.evaluate(target, Position(1, 0))
        self.assertFalse(result["correct"])
        self.assertEqual(result["positions"], [Position(6, 0)])


class TestFretboardTrainer(unittest.TestCase):
    def make(self, **kwargs):
        kwargs.setdefault("seed", 2024)
        kwargs.setdefault("countdown_factory", ManualCountdown)
        return FretboardTrainer(GUITAR_TUNING, **kwargs)

    def target_positions(self, trainer):
        return positions_for_pitch_class(GUITAR_TUNING, trainer.target.pitch.name)

    def test_correct_answer_marks_position_used(self):
        trainer = self.make()
        position = self.target_positions(trainer)[0]

        self.assertEqual(trainer.select(position).status, "idle")
        feedback = trainer.submit()
        self.assertEqual(feedback.status, "correct")
        self.assertEqual(trainer.session.streak, 1)
        self.assertEqual(trainer.revealed, self.target_positions(trainer))
        self.assertIn(position, trainer.disabled_positions)

        warning = trainer.select(position)
        self.assertEqual(warning.status, "warn")
        self.assertIn("Already used", warning.message)

    def test_correct_answer_cannot_be_submitted_twice(self):
        trainer = self.make()
        trainer.select(self.target_positions(trainer)[0])
        self.assertEqual(trainer.submit().status, "correct")
        self.assertIsNone(trainer.selected)

        again = trainer.submit()
        self.assertEqual(again.status, "warn")
        self.assertEqual(trainer.session.score.correct, 1)
        self.assertEqual(trainer.session.score.attempts, 1)
        self.assertEqual(trainer.session.streak, 1)

    def test_used_positions_are_bounded(self):
        trainer = self.make()
        positions = self.target_positions(trainer)
        self.assertGreater(len(positions), trainer.history_size)

        for position in positions:
            if trainer.select(position).status == "idle":
                self.assertEqual(trainer.submit().status, "correct")

        self.assertEqual(len(trainer.disabled_positions), trainer.history_size)
        self.assertEqual(
            list(trainer.disabled_positions), positions[-trainer.history_size:]
        )
        self.assertEqual(trainer.select(positions[0]).status, "idle")
        self.assertEqual(trainer.submit().status, "correct")

    def test_small_board_keeps_a_position_open(self):
        trainer = FretboardTrainer(UKULELE_TUNING, seed=7, countdown_factory=ManualCountdown)
        trainer.session.set_pool([DrillTarget(Pitch("C#", 4))])
        positions = positions_for_pitch_class(UKULELE_TUNING, "C#")
        self.assertEqual(len(positions), 4)

        for position in positions:
            if trainer.select(position).status == "idle":
                trainer.submit()

        open_positions = [p for p in positions if p not in trainer.disabled_positions]
        self.assertEqual(len(open_positions), 1)
        self.assertEqual(trainer.select(open_positions[0]).status, "idle")

    def test_incorrect_answer(self):
        trainer = self.make()
        correct = set(self.target_positions(trainer))
        wrong = next(p for p in all_positions(GUITAR_TUNING) if p not in correct)
        trainer.select(wrong)
        feedback = trainer.submit()
        self.assertEqual(feedback.status, "incorrect")
        self.assertEqual(trainer.session.streak, 0)
        self.assertEqual(trainer.session.score.attempts, 1)
        self.assertEqual(trainer.disabled_positions, [])

    def test_submit_without_selection(self):
        trainer = self.make()
        self.assertEqual(trainer.submit().status, "warn")
        self.assertEqual(trainer.session.score.attempts, 0)

    def test_next_clears_round(self):
        trainer = self.make()
        trainer.select(self.target_positions(trainer)[0])
        trainer.submit()
        previous = trainer.target
        trainer.next()
        self.assertIsNone(trainer.selected)
        self.assertEqual(trainer.feedback.status, "idle")
        self.assertEqual(trainer.revealed, [])
        self.assertNotEqual(trainer.target, previous)

    def test_hard_mode(self):
        trainer = self.make(hard=True)
        required = trainer.required_position
        self.assertIsNotNone(required)

        other_string = 1 if required.string != 1 else 2
        warning = trainer.select(Position(other_string, required.fret))
        self.assertEqual(warning.status, "warn")
        self.assertIn(f"string {required.string}", warning.message)
        self.assertIsNone(trainer.selected)

        trainer.select(required)
        self.assertEqual(trainer.submit().status, "correct")
        self.assertEqual(trainer.used_positions, {})
        self.assertEqual(trainer.revealed, [required])

    def test_set_hard_swaps_pools(self):
        trainer = self.make()
        trainer.select(self.target_positions(trainer)[0])
        trainer.submit()
        trainer.set_hard(True)
        self.assertEqual(trainer.used_positions, {})
        self.assertIsNotNone(trainer.required_position)
        self.assertEqual(len(trainer.session.pool), 72)

        trainer.set_hard(False)
        self.assertIsNone(trainer.required_position)
        self.assertEqual(len(trainer.session.pool), 12)

    def test_named_constructor(self):
        trainer = fretboard_trainer(UKULELE, seed=1, countdown_factory=ManualCountdown)
        self.assertIs(trainer.tuning, UKULELE_TUNING)
        self.assertIs(fretboard_trainer(GUITAR, seed=1).tuning, GUITAR_TUNING)


if __name__ == "__main__":
    unittest.main()
