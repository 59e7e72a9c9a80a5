import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quran_hifz.progress_store import MemoryProgressStore, utc_timestamp


class TestProgressUpsert(unittest.TestCase):
    def setUp(self):
        self.store = MemoryProgressStore()

    def test_missing_progress_is_none(self):
        self.assertIsNone(self.store.get_progress(1, 1, 1))

    def test_insert_defaults(self):
        progress = self.store.update_progress(1, 2, 3, phase=1, last_accessed="2024-01-01T00:00:00.000Z")

        self.assertEqual(progress.id, 1)
        self.assertEqual((progress.user_id, progress.surah_id, progress.verse_number), (1, 2, 3))
        self.assertEqual(progress.phase, 1)
        self.assertFalse(progress.completed)
        self.assertEqual(progress.last_accessed, "2024-01-01T00:00:00.000Z")
        self.assertEqual(self.store.get_progress(1, 2, 3), progress)

    def test_upsert_is_idempotent_per_key(self):
        first = self.store.update_progress(1, 2, 3, phase=2, completed=False, last_accessed="t1")
        second = self.store.update_progress(1, 2, 3, phase=2, completed=False, last_accessed="t1")

        self.assertEqual(first, second)
        self.assertEqual(len(self.store.get_all_progress_for_user(1)), 1)

    def test_update_keeps_id_and_replaces_phase(self):
        first = self.store.update_progress(1, 2, 3, phase=2)
        updated = self.store.update_progress(1, 2, 3, phase=5, completed=True, last_accessed="later")

        self.assertEqual(updated.id, first.id)
        self.assertEqual(updated.phase, 5)
        self.assertTrue(updated.completed)
        self.assertEqual(updated.last_accessed, "later")

    def test_update_without_completed_keeps_stored_flag(self):
        self.store.update_progress(1, 2, 3, phase=5, completed=True)
        updated = self.store.update_progress(1, 2, 3, phase=4)

        self.assertTrue(updated.completed)
        self.assertEqual(updated.phase, 4)

    def test_keys_are_independent(self):
        a = self.store.update_progress(1, 2, 3, phase=2)
        b = self.store.update_progress(1, 2, 4, phase=3)
        c = self.store.update_progress(2, 2, 3, phase=4)

        self.assertEqual(len({a.id, b.id, c.id}), 3)
        self.assertEqual(self.store.get_progress(1, 2, 3).phase, 2)
        self.assertEqual(self.store.get_progress(2, 2, 3).phase, 4)

    def test_phase_must_be_between_one_and_five(self):
        for phase in (0, 6, -1, 2.7):
            with self.subTest(phase=phase):
                with self.assertRaises(ValueError):
                    self.store.update_progress(1, 1, 1, phase=phase)
        self.assertIsNone(self.store.get_progress(1, 1, 1))

    def test_returned_records_are_copies(self):
        progress = self.store.update_progress(1, 1, 1, phase=1)
        progress.phase = 4

        self.assertEqual(self.store.get_progress(1, 1, 1).phase, 1)

    def test_all_progress_for_user(self):
        self.store.update_progress(1, 1, 1, phase=1)
        self.store.update_progress(1, 1, 2, phase=2)
        self.store.update_progress(2, 1, 1, phase=3)

        records = self.store.get_all_progress_for_user(1)

        self.assertEqual(sorted(p.verse_number for p in records), [1, 2])
        self.assertEqual(self.store.get_all_progress_for_user(3), [])

    def test_default_timestamp_is_utc_iso(self):
        progress = self.store.update_progress(1, 1, 1, phase=1)
        self.assertTrue(progress.last_accessed.endswith("Z"))
        self.assertRegex(utc_timestamp(), r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestUsers(unittest.TestCase):
    def setUp(self):
        self.store = MemoryProgressStore()

    def test_create_and_lookup(self):
        user = self.store.create_user("amina")

        self.assertEqual(user.id, 1)
        self.assertEqual(self.store.get_user(1), user)
        self.assertEqual(self.store.get_user_by_username("amina"), user)
        self.assertIsNone(self.store.get_user(2))
        self.assertIsNone(self.store.get_user_by_username("yusuf"))

    def test_ids_increment(self):
        self.assertEqual(self.store.create_user("a").id, 1)
        self.assertEqual(self.store.create_user("b").id, 2)

    def test_duplicate_username_rejected(self):
        self.store.create_user("amina")
        with self.assertRaises(ValueError):
            self.store.create_user("amina")

    def test_blank_username_rejected(self):
        with self.assertRaises(ValueError):
            self.store.create_user("   ")


if __name__ == "__main__":
    unittest.main()
