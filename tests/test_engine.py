import random
import unittest

from lifesim.game import engine
from lifesim.game.catalog import all_activities, all_events, find_activity
from lifesim.game.errors import PreconditionError, ValidationError
from lifesim.models import Character
from conftest import FixedRandom


def _character(**overrides):
    data = {"name": "Alex", "gender": "female", "country": "Norway"}
    data.update(overrides)
    return Character(**data)


def _minor_illness():
    return [event for event in all_events() if event.title == "Minor Illness"]


class AgeUpScenarioTests(unittest.TestCase):
    def test_age_up_without_job_and_forced_event(self):
        character = _character(
            age=24, health=60, looks=55, happiness=70, smarts=50, fame=0,
            bank_balance=1000, life_events=["You were born."],
        )

        updated, event = engine.age_up(character, _minor_illness(), FixedRandom(0.0))

        self.assertEqual(event.title, "Minor Illness")
        self.assertEqual(updated.age, 25)
        self.assertEqual(updated.health, 50)
        self.assertEqual(updated.happiness, 65)
        self.assertEqual(updated.looks, 55)
        self.assertEqual(updated.smarts, 50)
        self.assertEqual(updated.bank_balance, 1000)
        self.assertEqual(updated.life_events, ["You were born.", "You caught a cold and felt unwell."])

    def test_age_up_with_job_at_fifty_one(self):
        character = _character(
            age=50, health=80, looks=50, current_job="Doctor", salary=120000,
            bank_balance=5000, work_experience=3,
        )

        updated, event = engine.age_up(character, [], FixedRandom(0.0))

        self.assertIsNone(event)
        self.assertEqual(updated.age, 51)
        self.assertEqual(updated.health, 79)
        self.assertEqual(updated.looks, 50)
        self.assertEqual(updated.bank_balance, 125000)
        self.assertEqual(updated.work_experience, 4)
        self.assertEqual(updated.stat_residuals.get("looks"), -0.5)

    def test_looks_drop_every_second_year_after_forty(self):
        character = _character(age=41, looks=50)

        for _ in range(4):
            character, _ = engine.age_up(character, [], FixedRandom(0.0))

        self.assertEqual(character.age, 45)
        self.assertEqual(character.looks, 48)

    def test_age_up_does_not_touch_the_input(self):
        character = _character(age=30, health=60, life_events=["a"])

        engine.age_up(character, all_events(), random.Random(5))

        self.assertEqual(character.age, 30)
        self.assertEqual(character.life_events, ["a"])

    def test_many_age_ups_keep_invariants(self):
        rng = random.Random(11)
        character = _character(age=0, health=90, happiness=90, smarts=90, looks=90)
        previous_events = []

        for year in range(1, 101):
            character, _ = engine.age_up(character, all_events(), rng)
            self.assertEqual(character.age, year)
            self.assertEqual(character.life_events[: len(previous_events)], previous_events)
            previous_events = list(character.life_events)
            for stat in ("happiness", "health", "smarts", "looks", "fame"):
                self.assertTrue(0 <= character.stat(stat) <= 100)

    def test_deceased_cannot_age(self):
        with self.assertRaises(PreconditionError) as ctx:
            engine.age_up(_character(is_alive=False), all_events(), FixedRandom(0.0))
        self.assertEqual(ctx.exception.code, "deceased")


class ActivityTests(unittest.TestCase):
    def test_insufficient_funds_changes_nothing(self):
        character = _character(age=20, bank_balance=40, happiness=50)
        before = character.model_dump()

        with self.assertRaises(PreconditionError) as ctx:
            engine.apply_activity(character, 50, {"happiness": 5})

        self.assertEqual(ctx.exception.code, "insufficient_funds")
        self.assertEqual(character.model_dump(), before)

    def test_activity_charges_and_clamps(self):
        character = _character(age=20, bank_balance=500, health=98, looks=40)
        gym = find_activity(all_activities(), "gym")

        updated = engine.perform_activity(character, gym)

        self.assertEqual(updated.bank_balance, 450)
        self.assertEqual(updated.health, 100)
        self.assertEqual(updated.looks, 41)

    def test_activity_counts_assets(self):
        pet = find_activity(all_activities(), "Adopt a Pet")
        character = _character(age=20, bank_balance=1000)

        once = engine.perform_activity(character, pet)
        twice = engine.perform_activity(once, pet)

        self.assertEqual(twice.assets, {"pet": 2})
        self.assertEqual(twice.bank_balance, 500)

    def test_activity_age_limit(self):
        casino = find_activity(all_activities(), "casino")

        with self.assertRaises(PreconditionError) as ctx:
            engine.perform_activity(_character(age=18, bank_balance=10000), casino)
        self.assertEqual(ctx.exception.code, "too_young")

    def test_negative_cost_is_rejected(self):
        with self.assertRaises(ValidationError):
            engine.apply_activity(_character(), -10, {})


class CreateCharacterTests(unittest.TestCase):
    def _payload(self, **overrides):
        data = {"name": "Sam", "gender": "male", "country": "Japan", "talent": "normal"}
        data.update(overrides)
        return data

    def test_rolled_stats(self):
        character = engine.create_character(self._payload(), FixedRandom(0.5))

        self.assertEqual(character.happiness, 70)
        self.assertEqual(character.health, 70)
        self.assertEqual(character.smarts, 60)
        self.assertEqual(character.looks, 60)
        self.assertEqual(character.bank_balance, 3500)
        self.assertEqual(character.age, 0)
        self.assertEqual(character.fame, 0)
        self.assertIsNone(character.current_job)
        self.assertEqual(character.life_events, [])

    def test_supplied_stats_are_kept(self):
        character = engine.create_character(
            self._payload(happiness=10, health=20, smarts=30, looks=40, bank_balance=7), FixedRandom(0.9)
        )

        self.assertEqual(
            (character.happiness, character.health, character.smarts, character.looks, character.bank_balance),
            (10, 20, 30, 40, 7),
        )

    def test_famous_talent_starts_with_fame(self):
        character = engine.create_character(self._payload(talent="famous"), FixedRandom(0.0))

        self.assertEqual(character.fame, 10)

    def test_invalid_input(self):
        bad_payloads = [
            self._payload(name="  "),
            self._payload(gender="other"),
            self._payload(country=""),
            self._payload(talent="genius"),
            self._payload(smarts=101),
            self._payload(looks="pretty"),
            self._payload(bank_balance=-500),
        ]
        for payload in bad_payloads:
            with self.assertRaises(ValidationError):
                engine.create_character(payload, FixedRandom(0.0))


if __name__ == "__main__":
    unittest.main()
