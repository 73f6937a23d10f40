import json
import random
import tempfile
import unittest
from pathlib import Path

from lifesim.game.errors import ConflictError, NotFoundError, ValidationError
from lifesim.game.repository import DataStore
from lifesim.game.services import GameService


def _write_config(base: Path, payload) -> None:
    (base / "config.json").write_text(json.dumps(payload), encoding="utf-8")


PAYLOAD = {"name": "Alex", "gender": "male", "country": "Canada", "talent": "normal"}


class ServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base_path = Path(self.tmpdir.name)
        self.store = DataStore(self.base_path)
        self.service = GameService(self.store, rng=random.Random(42))

    def tearDown(self):
        self.tmpdir.cleanup()

    def _new_character(self, code="1234", **payload):
        if self.service.get_save_code(code) is None:
            self.assertTrue(self.service.create_save_code(code)["ok"])
        result = self.service.create_character(code, {**PAYLOAD, **payload})
        self.assertTrue(result["ok"], result["reason"])
        return result["character"]

    def _store_changes(self, character_id, **changes):
        character = self.service.load_character(character_id)
        for name, value in changes.items():
            setattr(character, name, value)
        return self.service.save_character(character, expected_revision=character.revision)


class SaveCodeTests(ServiceTestCase):
    def test_invalid_codes_are_rejected(self):
        for code in ("123", "12345", "12a4", "", None, "١٢٣٤", "１２３４"):
            result = self.service.create_save_code(code)
            self.assertFalse(result["ok"])
            self.assertEqual(result["code"], "invalid_save_code")

    def test_duplicate_code(self):
        self.assertTrue(self.service.create_save_code("0042")["ok"])

        result = self.service.create_save_code("0042")

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "save_code_exists")

    def test_lookup(self):
        self.service.create_save_code("7777")

        self.assertEqual(self.service.get_save_code("7777").code, "7777")
        self.assertIsNone(self.service.get_save_code("8888"))
        self.assertIsNone(self.service.get_save_code("bad"))

    def test_characters_by_code(self):
        first = self._new_character("1111")
        second = self._new_character("1111", name="Blake")
        self._new_character("2222", name="Casey")

        found = self.service.characters_by_code("1111")

        self.assertEqual([c.id for c in found], [first.id, second.id])
        self.assertEqual(self.service.characters_by_code("9999"), [])


class CharacterLifecycleTests(ServiceTestCase):
    def test_create_character_assigns_ids_and_family(self):
        first = self._new_character()
        second = self._new_character(name="Blake")

        self.assertEqual((first.id, second.id), (1, 2))
        self.assertEqual(first.revision, 1)
        self.assertEqual(first.save_code, "1234")
        family = self.service.list_relationships(first.id)
        self.assertIn(len(family), (2, 3))
        self.assertTrue(all(rel.character_id == first.id for rel in family))

    def test_create_character_requires_known_code(self):
        result = self.service.create_character("4321", PAYLOAD)

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "save_code_not_found")
        self.assertEqual(list(self.store.iter_character_ids()), [])

    def test_create_character_reports_validation(self):
        self.service.create_save_code("1234")

        result = self.service.create_character("1234", {**PAYLOAD, "gender": "robot"})

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "invalid_input")

    def test_age_up_persists(self):
        character = self._new_character()

        result = self.service.age_up(character.id)

        self.assertTrue(result["ok"])
        stored = self.service.load_character(character.id)
        self.assertEqual(stored.age, 1)
        self.assertEqual(stored.revision, 2)
        self.assertEqual(result["character"], stored)
        self.assertIn("event", result)

    def test_age_up_unknown_character(self):
        result = self.service.age_up(99)

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "character_not_found")
        self.assertIsNone(result["event"])

    def test_delete_character(self):
        character = self._new_character()
        self.service.link_session(5, "1234", character.id)

        self.assertTrue(self.service.delete_character(character.id))
        self.assertFalse(self.service.delete_character(character.id))
        self.assertIsNone(self.service.load_character(character.id))
        self.assertEqual(self.service.list_relationships(character.id), [])
        self.assertIsNone(self.service.load_session(5).character_id)


class ConcurrencyTests(ServiceTestCase):
    def test_stale_snapshot_is_rejected(self):
        character = self._new_character()
        stale = self.service.load_character(character.id)
        self._store_changes(character.id, happiness=1)

        stale.happiness = 99
        with self.assertRaises(ConflictError):
            self.service.save_character(stale, expected_revision=stale.revision)

        self.assertEqual(self.service.load_character(character.id).happiness, 1)

    def test_each_write_bumps_revision(self):
        character = self._new_character()

        saved = self._store_changes(character.id, happiness=10)
        saved_again = self._store_changes(character.id, happiness=20)

        self.assertEqual((saved.revision, saved_again.revision), (2, 3))


class CareerServiceTests(ServiceTestCase):
    def test_unknown_action_is_reported(self):
        character = self._new_character()

        result = self.service.perform_career_action(character.id, "nap")

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "unknown_action")
        self.assertEqual(result["character"].revision, character.revision)

    def test_rejected_action_keeps_stored_state(self):
        character = self._new_character()

        result = self.service.perform_career_action(character.id, "work")

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "not_employed")
        self.assertEqual(self.service.load_character(character.id).revision, character.revision)

    def test_apply_then_work(self):
        character = self._new_character()
        self._store_changes(character.id, age=18)

        hired = self.service.perform_career_action(character.id, "apply", {"career": "Restaurant Worker"})
        worked = self.service.perform_career_action(character.id, "work")

        self.assertTrue(hired["ok"])
        self.assertEqual(hired["details"], {"job": "Restaurant Worker"})
        self.assertTrue(worked["ok"])
        self.assertEqual(worked["details"]["bonus"], 2500)
        self.assertEqual(self.service.load_character(character.id).work_experience, 1)

    def test_apply_to_unknown_career(self):
        character = self._new_character()

        result = self.service.perform_career_action(character.id, "apply", {"career": "Astronaut"})

        self.assertEqual(result["code"], "career_not_found")

    def test_balance_overrides_from_config(self):
        _write_config(self.base_path, {"balance": {"career": {"military_salary": 40000}}})
        character = self._new_character()
        self._store_changes(character.id, age=18, health=60)

        result = self.service.perform_career_action(character.id, "military")

        self.assertTrue(result["ok"])
        self.assertEqual(result["character"].salary, 40000)


class ActivityServiceTests(ServiceTestCase):
    def test_insufficient_funds(self):
        character = self._new_character()
        self._store_changes(character.id, age=20, bank_balance=40)

        result = self.service.perform_activity(character.id, "gym")

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "insufficient_funds")
        self.assertEqual(self.service.load_character(character.id).bank_balance, 40)

    def test_unknown_activity(self):
        character = self._new_character()

        result = self.service.perform_activity(character.id, "skydiving")

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "activity_not_found")

    def test_custom_activity(self):
        character = self._new_character()
        self._store_changes(character.id, bank_balance=1000, happiness=50)

        result = self.service.apply_activity(character.id, {"happiness": 7}, cost=300)

        self.assertTrue(result["ok"])
        self.assertEqual(result["changes"], {"happiness": 7, "bank_balance": -300})


class RelationshipServiceTests(ServiceTestCase):
    def test_spend_time_with_one_relative(self):
        character = self._new_character()
        before = {rel.id: rel.relationship for rel in self.service.list_relationships(character.id)}

        result = self.service.spend_time(character.id, 1)

        self.assertTrue(result["ok"])
        after = {rel.id: rel.relationship for rel in self.service.list_relationships(character.id)}
        self.assertGreaterEqual(after[1], before[1])
        self.assertEqual(after[2], before[2])

    def test_spend_time_with_unknown_relative(self):
        character = self._new_character()

        result = self.service.spend_time(character.id, 42)

        self.assertFalse(result["ok"])
        self.assertEqual(result["code"], "relationship_not_found")


class SessionTests(ServiceTestCase):
    def test_link_and_load(self):
        character = self._new_character()

        self.service.link_session(10, "1234", character.id)

        self.assertEqual(self.service.load_session(10).character_id, character.id)
        self.assertEqual(self.service.active_character(10).id, character.id)
        self.assertIsNone(self.service.load_session(11))

    def test_link_rejects_foreign_character(self):
        character = self._new_character("1111")
        self.service.create_save_code("2222")

        with self.assertRaises(NotFoundError):
            self.service.link_session(10, "2222", character.id)
        with self.assertRaises(ValidationError):
            self.service.link_session(10, "abc")


class CatalogAndConfigTests(ServiceTestCase):
    def test_catalog_queries(self):
        self.assertEqual([c.name for c in self.service.careers_by_category("technology")], ["Software Engineer"])
        self.assertEqual([e.title for e in self.service.life_events_by_type("HEALTH")], ["Minor Illness"])
        self.assertEqual(len(self.service.all_life_events()), 5)
        self.assertEqual(len(self.service.all_careers()), 6)
        self.assertEqual(len(self.service.all_activities()), 10)

    def test_malformed_config_falls_back_to_defaults(self):
        (self.base_path / "config.json").write_text("{not json", encoding="utf-8")

        self.assertEqual(self.service.get_config(), {})
        self.assertEqual(self.service.get_balance_profile().career.military_salary, 32000)

    def test_config_reload_on_change(self):
        _write_config(self.base_path, {"balance": {"ageing": {"looks_delta": -1}}})
        self.assertEqual(self.service.get_balance_profile().ageing.looks_delta, -1.0)

        _write_config(self.base_path, {"balance": {"ageing": {"looks_delta": -2}}, "logging": {"level": "DEBUG"}})
        self.service._config_cache_key = None

        self.assertEqual(self.service.get_balance_profile().ageing.looks_delta, -2.0)

    def test_data_dir_override(self):
        _write_config(self.base_path, {"paths": {"data_dir": "custom"}})

        self.service.get_config()

        self.assertEqual(self.store.data_dir, (self.base_path / "custom").resolve())
        self.assertTrue(self.store.characters_dir.is_dir())


if __name__ == "__main__":
    unittest.main()
