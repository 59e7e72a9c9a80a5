import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quran_hifz.phases import MemorizationPhase, coerce_phase, phase_view, progress_percentage


class TestMemorizationPhase(unittest.TestCase):
    def test_five_ordered_phases(self):
        self.assertEqual([int(p) for p in MemorizationPhase], [1, 2, 3, 4, 5])
        self.assertEqual(MemorizationPhase.TEXT_WITH_HOLES.title, "Text with Holes")

    def test_next_is_linear_and_stops_at_last(self):
        phase = MemorizationPhase.TEXT_WITH_AUDIO
        seen = [phase]
        while not phase.is_last:
            phase = phase.next()
            seen.append(phase)

        self.assertEqual(seen, list(MemorizationPhase))
        self.assertIs(MemorizationPhase.COMPLETE_MEMORIZATION.next(), MemorizationPhase.COMPLETE_MEMORIZATION)

    def test_coerce_phase(self):
        self.assertIs(coerce_phase(3), MemorizationPhase.TEXT_WITH_HOLES)
        self.assertIs(coerce_phase("4"), MemorizationPhase.EMPTY_WITH_AUDIO)
        self.assertIs(coerce_phase(2.0), MemorizationPhase.TEXT_WITHOUT_AUDIO)
        for value in (0, 6, None, "x", True, 2.7, "2.7"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    coerce_phase(value)

    def test_progress_percentage(self):
        self.assertEqual(progress_percentage(1), 0)
        self.assertEqual(progress_percentage(3), 50)
        self.assertEqual(progress_percentage(5), 100)

    def test_phase_views(self):
        self.assertTrue(phase_view(1).highlight_words)
        self.assertTrue(phase_view(2).show_text)
        self.assertFalse(phase_view(2).highlight_words)
        self.assertTrue(phase_view(3).show_holes)
        self.assertFalse(phase_view(4).show_text)
        self.assertIn("Listen", phase_view(4).prompt)
        self.assertIn("completely from memory", phase_view(5).prompt)


if __name__ == "__main__":
    unittest.main()
