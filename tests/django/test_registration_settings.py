from django.test import SimpleTestCase

from guidance.services.registration_settings import (
    MISSING_WINDOW,
    NO_DATES,
    TOGGLE_ADDED,
    TOGGLE_EXISTING,
    TOGGLE_INVALID,
    TOGGLE_REMOVED,
    TOGGLE_WEEKEND,
    DraftValidationError,
    RegistrationDraft,
)
from guidance.utils.calendar import build_month_grids
from guidance.utils.dates import is_weekend


def make_draft(**overrides):
    settings = {
        "registration_open": True,
        "academic_year": "2025-2026",
        "exam_start_date": "2025-03-03",
        "exam_end_date": "2025-03-14",
        "existing_exam_dates": ["2025-03-05T00:00:00Z"],
    }
    settings.update(overrides)
    return RegistrationDraft.from_settings(settings)


class DraftInitialisationTests(SimpleTestCase):
    def test_existing_dates_start_selected(self):
        draft = make_draft()
        self.assertEqual(draft.existing, ["2025-03-05"])
        self.assertEqual(draft.selected, ["2025-03-05"])

    def test_defaults_fill_gaps(self):
        draft = RegistrationDraft.from_settings({})
        self.assertEqual(draft.data["semester"], "1st")
        self.assertEqual(draft.data["students_per_day"], 40)
        self.assertEqual(draft.data["morning_start_time"], "08:00")
        self.assertEqual(draft.data["afternoon_end_time"], "16:00")
        self.assertFalse(draft.data["delete_previous_schedules"])
        self.assertRegex(draft.data["academic_year"], r"^\d{4}-\d{4}$")


class ToggleTests(SimpleTestCase):
    def test_toggle_adds_and_removes(self):
        draft = make_draft()
        self.assertEqual(draft.toggle("2025-03-06"), TOGGLE_ADDED)
        self.assertIn("2025-03-06", draft.selected)
        self.assertEqual(draft.toggle("2025-03-06"), TOGGLE_REMOVED)
        self.assertNotIn("2025-03-06", draft.selected)

    def test_weekends_are_rejected(self):
        draft = make_draft()
        self.assertEqual(draft.toggle("2025-03-08"), TOGGLE_WEEKEND)
        self.assertNotIn("2025-03-08", draft.selected)

    def test_existing_dates_cannot_be_removed(self):
        draft = make_draft()
        self.assertEqual(draft.toggle("2025-03-05"), TOGGLE_EXISTING)
        self.assertIn("2025-03-05", draft.selected)

    def test_invalid_dates_are_ignored(self):
        draft = make_draft()
        self.assertEqual(draft.toggle("not-a-date"), TOGGLE_INVALID)
        self.assertEqual(draft.selected, ["2025-03-05"])


class BulkSelectionTests(SimpleTestCase):
    def test_select_all_is_weekdays_only(self):
        draft = make_draft()
        draft.select_all()

        self.assertEqual(len(draft.selected), 10)
        self.assertFalse(any(is_weekend(d) for d in draft.selected))
        self.assertIn("2025-03-05", draft.selected)

    def test_range_falls_back_to_stored_settings(self):
        draft = make_draft()
        draft.update(exam_start_date="", exam_end_date="")
        draft.select_weekdays()
        self.assertEqual(len(draft.selected), 10)

    def test_clear_keeps_existing(self):
        draft = make_draft()
        draft.select_all()
        draft.clear()
        self.assertEqual(draft.selected, ["2025-03-05"])


class RebaseTests(SimpleTestCase):
    def test_newly_scheduled_dates_become_locked_and_selected(self):
        draft = make_draft()
        draft.toggle("2025-03-06")
        current = make_draft(registration_open=False, existing_exam_dates=["2025-03-05", "2025-03-10"])

        draft.rebase(current)

        self.assertEqual(draft.existing, ["2025-03-05", "2025-03-10"])
        self.assertEqual(draft.selected, ["2025-03-05", "2025-03-10", "2025-03-06"])
        self.assertFalse(draft.stored["registration_open"])
        self.assertEqual(draft.toggle("2025-03-10"), TOGGLE_EXISTING)
        # Local edits to the form itself survive.
        self.assertTrue(draft.data["registration_open"])


class ValidationTests(SimpleTestCase):
    def test_closed_registration_skips_checks(self):
        draft = make_draft(registration_open=False, exam_start_date=None)
        draft.validate()

    def test_missing_window(self):
        draft = make_draft(exam_end_date=None)
        with self.assertRaisesMessage(DraftValidationError, MISSING_WINDOW):
            draft.validate()

    def test_no_dates(self):
        draft = make_draft(existing_exam_dates=[])
        with self.assertRaisesMessage(DraftValidationError, NO_DATES):
            draft.validate()

    def test_dates_outside_window(self):
        draft = make_draft(existing_exam_dates=["2025-04-01"])
        with self.assertRaisesMessage(
            DraftValidationError, "Selected dates must be within the exam window (Mar 3, 2025 - Mar 14, 2025)"
        ):
            draft.validate()

    def test_calendar_hidden_when_deleting_previous_schedules(self):
        draft = make_draft()
        self.assertTrue(draft.calendar_visible())
        draft.update(delete_previous_schedules=True)
        self.assertFalse(draft.calendar_visible())


class CalendarGridTests(SimpleTestCase):
    def test_grid_alignment(self):
        # 2025-03-01 is a Saturday: six leading blanks.
        grids = build_month_grids(["2025-03-01", "2025-03-02", "2025-03-03"], selected=["2025-03-03"])

        self.assertEqual(len(grids), 1)
        month = grids[0]
        self.assertEqual(month["month"], "March 2025")
        self.assertEqual(month["headers"][0], "Sun")
        first_week = month["weeks"][0]
        self.assertEqual(first_week[:6], [None] * 6)
        self.assertTrue(first_week[6]["disabled"])
        second_week = month["weeks"][1]
        self.assertEqual(second_week[0]["date"], "2025-03-02")
        self.assertTrue(second_week[1]["selected"])
        self.assertEqual(second_week[2:], [None] * 5)
        self.assertTrue(all(len(week) == 7 for week in month["weeks"]))

    def test_months_are_chronological(self):
        grids = build_month_grids(["2025-04-01", "2025-03-31"], existing=["2025-03-31"])
        self.assertEqual([g["key"] for g in grids], ["2025-03", "2025-04"])
        self.assertTrue(grids[0]["weeks"][0][1]["existing"])
