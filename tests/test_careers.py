import unittest

from lifesim.game import careers
from lifesim.game.balance import CareerBalance
from lifesim.game.catalog import all_careers
from lifesim.game.errors import PreconditionError, ValidationError
from lifesim.models import Character
from conftest import FixedRandom


def _character(**overrides):
    data = {"name": "Alex", "gender": "male", "country": "Canada", "age": 30}
    data.update(overrides)
    return Character(**data)


def _employed(**overrides):
    data = {"current_job": "Teacher", "salary": 50000, "job_reputation": 60, "happiness": 70}
    data.update(overrides)
    return _character(**data)


class EmploymentStateTests(unittest.TestCase):
    def test_state_follows_current_job(self):
        self.assertEqual(careers.employment_state(_character()), careers.EmploymentState.UNEMPLOYED)
        self.assertEqual(careers.employment_state(_employed()), careers.EmploymentState.EMPLOYED)

    def test_allowed_actions_per_state(self):
        self.assertEqual(
            careers.allowed_actions(_character()),
            ["apply", "military", "part_time", "recruiter", "gig"],
        )
        self.assertEqual(
            careers.allowed_actions(_employed()),
            ["work", "work_hard", "promotion", "quit", "gig"],
        )

    def test_employed_actions_require_a_job(self):
        character = _character()
        for action in ("work", "work_hard", "promotion", "quit"):
            with self.assertRaises(PreconditionError) as ctx:
                careers.perform(character, action, rng=FixedRandom())
            self.assertEqual(ctx.exception.code, "not_employed")

    def test_job_search_requires_unemployment(self):
        character = _employed()
        for action in ("apply", "military", "part_time", "recruiter"):
            with self.assertRaises(PreconditionError) as ctx:
                careers.perform(character, action, careers=all_careers(), rng=FixedRandom())
            self.assertEqual(ctx.exception.code, "already_employed")

    def test_unknown_action(self):
        with self.assertRaises(ValidationError) as ctx:
            careers.perform(_employed(), "moonlight")
        self.assertEqual(ctx.exception.code, "unknown_action")

    def test_deceased_characters_cannot_work(self):
        with self.assertRaises(PreconditionError) as ctx:
            careers.work(_employed(is_alive=False))
        self.assertEqual(ctx.exception.code, "deceased")


class EmployedActionTests(unittest.TestCase):
    def test_work_pays_bonus(self):
        character = _employed(bank_balance=100, work_experience=2)

        updated = careers.work(character)

        self.assertEqual(updated.bank_balance, 5100)
        self.assertEqual(updated.work_experience, 3)
        self.assertEqual(updated.happiness, 75)
        self.assertEqual(character.bank_balance, 100)

    def test_work_hard_caps_reputation(self):
        updated = careers.work_hard(_employed(job_reputation=90), FixedRandom(0.99))

        self.assertEqual(updated.job_reputation, 100)
        self.assertEqual(updated.happiness, 75)

    def test_work_hard_gain_range(self):
        low = careers.work_hard(_employed(job_reputation=0), FixedRandom(0.0))
        high = careers.work_hard(_employed(job_reputation=0), FixedRandom(0.999))

        self.assertEqual(low.job_reputation, 10)
        self.assertEqual(high.job_reputation, 24)

    def test_successful_promotion(self):
        character = _employed(salary=50000, job_reputation=60, happiness=70)

        updated, promoted = careers.ask_for_promotion(character, FixedRandom(0.1))

        self.assertTrue(promoted)
        self.assertEqual(updated.salary, 60000)
        self.assertEqual(updated.job_reputation, 40)
        self.assertEqual(updated.happiness, 85)

    def test_failed_promotion(self):
        character = _employed(salary=50000, job_reputation=60, happiness=70)

        updated, promoted = careers.ask_for_promotion(character, FixedRandom(0.9))

        self.assertFalse(promoted)
        self.assertEqual(updated.salary, 50000)
        self.assertEqual(updated.job_reputation, 50)
        self.assertEqual(updated.happiness, 65)

    def test_promotion_chance_is_capped(self):
        character = _employed(job_reputation=100)

        self.assertEqual(careers.promotion_chance(character), 0.8)
        _, promoted = careers.ask_for_promotion(character, FixedRandom(0.85))
        self.assertFalse(promoted)

    def test_reputation_never_goes_negative(self):
        updated, _ = careers.ask_for_promotion(_employed(job_reputation=5), FixedRandom(0.99))

        self.assertEqual(updated.job_reputation, 0)

    def test_quit_resets_employment(self):
        updated = careers.quit_job(_employed(happiness=95))

        self.assertIsNone(updated.current_job)
        self.assertEqual(updated.salary, 0)
        self.assertEqual(updated.job_reputation, 0)
        self.assertEqual(updated.happiness, 100)


class JobSearchTests(unittest.TestCase):
    def setUp(self):
        self.catalog = {career.name: career for career in all_careers()}

    def test_apply_checks_age(self):
        with self.assertRaises(PreconditionError) as ctx:
            careers.apply_for(_character(age=20, smarts=99), self.catalog["Doctor"])
        self.assertEqual(ctx.exception.code, "too_young")

    def test_apply_checks_requirements(self):
        with self.assertRaises(PreconditionError) as ctx:
            careers.apply_for(_character(age=30, smarts=70), self.catalog["Software Engineer"])
        self.assertEqual(ctx.exception.code, "requirements_unmet")
        self.assertIn("smarts 80", ctx.exception.message)

    def test_apply_hires(self):
        updated = careers.apply_for(_character(age=30, smarts=85, work_experience=4), self.catalog["Software Engineer"])

        self.assertEqual(updated.current_job, "Software Engineer")
        self.assertEqual(updated.salary, 80000)
        self.assertEqual(updated.work_experience, 0)
        self.assertEqual(updated.job_reputation, 0)

    def test_perform_apply_by_name(self):
        updated, details = careers.perform(
            _character(age=16),
            "apply",
            careers=all_careers(),
            params={"career": "restaurant worker"},
        )

        self.assertEqual(updated.current_job, "Restaurant Worker")
        self.assertEqual(details, {"job": "Restaurant Worker"})

    def test_military_requirements(self):
        with self.assertRaises(PreconditionError) as ctx:
            careers.join_military(_character(age=17, health=90))
        self.assertEqual(ctx.exception.code, "too_young")

        with self.assertRaises(PreconditionError) as ctx:
            careers.join_military(_character(age=20, health=40))
        self.assertEqual(ctx.exception.code, "requirements_unmet")

        updated = careers.join_military(_character(age=18, health=50))
        self.assertEqual(updated.current_job, "Soldier")
        self.assertEqual(updated.salary, 32000)

    def test_military_uses_balance_override(self):
        balance = CareerBalance(military_salary=40000)

        updated = careers.join_military(_character(age=18, health=80), balance)

        self.assertEqual(updated.salary, 40000)

    def test_part_time_listing(self):
        with self.assertRaises(PreconditionError):
            careers.take_part_time(_character(age=13), FixedRandom(0.0))

        updated = careers.take_part_time(_character(age=14), FixedRandom(0.0))

        self.assertEqual(updated.current_job, "Barista (Part-Time)")
        self.assertEqual(updated.salary, 12000)

    def test_recruiter_without_offers(self):
        with self.assertRaises(PreconditionError) as ctx:
            careers.visit_recruiter(_character(age=12), all_careers(), FixedRandom(0.0))
        self.assertEqual(ctx.exception.code, "no_offers")

    def test_recruiter_picks_only_eligible_careers(self):
        character = _character(age=30, smarts=10, health=10, looks=10)

        for value in (0.0, 0.5, 0.99):
            updated, career = careers.visit_recruiter(character, all_careers(), FixedRandom(value))
            self.assertEqual(career.name, "Restaurant Worker")
            self.assertEqual(updated.salary, 25000)

    def test_gig_in_any_state(self):
        for character in (_character(bank_balance=10), _employed(bank_balance=10)):
            updated, pay = careers.freelance_gig(character, FixedRandom(integer=120))
            self.assertEqual(pay, 120)
            self.assertEqual(updated.bank_balance, 130)
            self.assertEqual(updated.happiness, character.happiness - 2)

    def test_gig_age_limit(self):
        with self.assertRaises(PreconditionError) as ctx:
            careers.freelance_gig(_character(age=11), FixedRandom())
        self.assertEqual(ctx.exception.code, "too_young")


def test_age_up_salary():
    assert careers.age_up_salary(_employed(salary=120000, work_experience=3)) == (120000, 4)
    assert careers.age_up_salary(_character(work_experience=2)) == (0, 2)
    assert careers.age_up_salary(_employed(salary=0, work_experience=0)) == (0, 1)


if __name__ == "__main__":
    unittest.main()
