import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quran_hifz.api_clients import Surah, Verse
from quran_hifz.verse_display import (
    HOLE_HTML,
    render_holes,
    render_progress_html,
    render_verse_html,
    words_with_holes,
)
from quran_hifz.word_timing import estimate_word_timings, split_words

SURAH = Surah(
    number=112,
    name="سُورَةُ الإِخۡلَاصِ",
    english_name="Al-Ikhlaas",
    english_name_translation="Sincerity",
    number_of_ayahs=4,
    revelation_type="Meccan",
)
VERSE = Verse(
    surah=SURAH,
    number=6222,
    number_in_surah=1,
    text="قُلۡ هُوَ ٱللَّهُ أَحَدٌ",
    translation="SAY: He is the One God:",
)
AUDIO_URL = "https://cdn.example.test/audio/6222.mp3"


class TestHoles(unittest.TestCase):
    def test_every_third_word_from_index_one(self):
        words = words_with_holes("a b c d e f g")
        self.assertEqual(words, ["a", None, "c", "d", None, "f", "g"])

    def test_render_holes(self):
        self.assertEqual(render_holes("a b c"), f"a {HOLE_HTML} c")
        self.assertEqual(render_holes(""), "")

    def test_words_are_escaped(self):
        self.assertEqual(render_holes("<b> x"), f"&lt;b&gt; {HOLE_HTML}")


class TestRenderVerse(unittest.TestCase):
    def test_phase_one_has_timed_word_spans(self):
        timings = estimate_word_timings(split_words(VERSE.text), 4.0)
        html = render_verse_html(VERSE, 1, timings, AUDIO_URL)

        self.assertEqual(html.count('class="hifz-word"'), 4)
        self.assertIn('data-start="0.500"', html)
        self.assertIn('data-end="4.000"', html)
        self.assertIn("data-highlight='true'", html)
        self.assertIn('title="SAY: He"', html)
        self.assertIn(f"src='{AUDIO_URL}'", html)

    def test_phase_one_without_timings_disables_highlight(self):
        html = render_verse_html(VERSE, 1, [], AUDIO_URL)

        self.assertIn("data-highlight='false'", html)
        self.assertNotIn("data-start", html)

    def test_phase_two_plain_text(self):
        html = render_verse_html(VERSE, 2, audio_url=AUDIO_URL)

        self.assertIn(VERSE.text, html)
        self.assertNotIn("hifz-word", html)

    def test_phase_three_holes(self):
        html = render_verse_html(VERSE, 3)

        self.assertEqual(html.count(HOLE_HTML), 1)
        self.assertNotIn("هُوَ", html)
        self.assertIn("قُلۡ", html)

    def test_phases_four_and_five_hide_text(self):
        for phase in (4, 5):
            with self.subTest(phase=phase):
                html = render_verse_html(VERSE, phase, audio_url=AUDIO_URL)
                self.assertNotIn("ٱللَّهُ", html)
                self.assertIn("hifz-prompt", html)
                self.assertIn("<audio", html)

    def test_header_and_missing_verse(self):
        self.assertIn("Al-Ikhlaas", render_verse_html(VERSE, 2))
        self.assertIn("No verse selected", render_verse_html(None, 1))

    def test_no_audio_tag_without_url(self):
        self.assertNotIn("<audio", render_verse_html(VERSE, 2))


class TestRenderProgress(unittest.TestCase):
    def test_labels_and_width(self):
        html = render_progress_html(3, 2, 4)

        self.assertIn("width: 50%", html)
        self.assertIn("Phase 3/5", html)
        self.assertIn("Verse 2/4", html)

    def test_first_phase_is_empty_bar(self):
        self.assertIn("width: 0%", render_progress_html(1, 1, 7))


if __name__ == "__main__":
    unittest.main()
