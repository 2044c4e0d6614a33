from django.http import QueryDict
from django.test import SimpleTestCase

from guidance.choices import ErrorKind
from guidance.utils.error_messages import classify_error, display_message, remap_field_errors
from guidance.utils.pagination import paginate, parse_positive_int
from guidance.utils.query_state import QueryState
from guidance.utils.selection import ExpansionState, Selection


class PaginateTests(SimpleTestCase):
    def test_slice_and_bounds(self):
        items = list(range(1, 26))

        page = paginate(items, 2, 10)

        self.assertEqual(page["data"], list(range(11, 21)))
        self.assertEqual(page["from"], 11)
        self.assertEqual(page["to"], 20)
        self.assertEqual(page["total_pages"], 3)

    def test_last_partial_page(self):
        page = paginate(list(range(25)), 3, 10)
        self.assertEqual(len(page["data"]), 5)
        self.assertEqual(page["to"], 25)

    def test_empty_list_from_is_zero(self):
        page = paginate([], 1, 10)
        self.assertEqual(page["from"], 0)
        self.assertEqual(page["to"], 0)
        self.assertEqual(page["total_pages"], 0)

    def test_parse_positive_int(self):
        self.assertEqual(parse_positive_int("3", 1), 3)
        self.assertEqual(parse_positive_int("abc", 10), 10)
        self.assertEqual(parse_positive_int(None, 10), 10)
        self.assertEqual(parse_positive_int("0", 10), 10)


class SelectionTests(SimpleTestCase):
    def test_toggle_keeps_order(self):
        selection = Selection([3, 1])
        selection.toggle(2)
        selection.toggle(3)
        self.assertEqual(selection.ids, [1, 2])

    def test_bucket_toggle_adds_then_removes(self):
        selection = Selection([1])
        selection.toggle_bucket([1, 2, 3])
        self.assertEqual(selection.ids, [1, 2, 3])
        self.assertTrue(selection.is_fully_selected([1, 2, 3]))

        selection.toggle_bucket([2, 3])
        self.assertEqual(selection.ids, [1])
        self.assertFalse(selection.is_fully_selected([1, 2]))

    def test_toggle_all(self):
        selection = Selection()
        selection.toggle_all([5, 6])
        self.assertEqual(selection.ids, [5, 6])
        selection.toggle_all([5, 6])
        self.assertEqual(selection.ids, [])

    def test_expansion_is_independent_per_key(self):
        expansion = ExpansionState()
        self.assertTrue(expansion.toggle("2025"))
        self.assertTrue(expansion.toggle("2025-03"))
        self.assertFalse(expansion.toggle("2025"))
        self.assertEqual(expansion.keys(), ["2025-03"])


class QueryStateTests(SimpleTestCase):
    def test_updates_drop_empty_values(self):
        state = QueryState("/guidance/question-bank", {"category": "Math", "page": "3"})

        updated = state.with_updates(category="", page=1, sort="oldest")

        self.assertEqual(updated.as_dict(), {"page": "1", "sort": "oldest"})
        self.assertEqual(state.get("category"), "Math")

    def test_url_round_trip(self):
        query = QueryDict("search=algebra&per_page=30&questionId=7")
        state = QueryState.from_query("/guidance/question-bank", query).without("questionId")
        self.assertEqual(state.url(), "/guidance/question-bank?search=algebra&per_page=30")

    def test_bare_path_without_params(self):
        self.assertEqual(QueryState("/guidance/question-bank").url(), "/guidance/question-bank")


class ErrorMessageTests(SimpleTestCase):
    def test_structured_codes_win(self):
        self.assertEqual(classify_error({"code": "unique", "message": "whatever"}), ErrorKind.UNIQUE)
        self.assertEqual(classify_error({"code": "mystery"}), ErrorKind.OTHER)

    def test_legacy_substring_fallback(self):
        self.assertEqual(classify_error("validation.unique"), ErrorKind.UNIQUE)
        self.assertEqual(classify_error("The password confirmation does not match."), ErrorKind.CONFIRMATION_MISMATCH)
        self.assertEqual(classify_error("The password must be at least 8 characters."), ErrorKind.TOO_SHORT)
        self.assertEqual(classify_error("Something broke"), ErrorKind.OTHER)

    def test_display_messages(self):
        self.assertEqual(
            display_message("email", "The email has already been taken."),
            "This email address is already registered. Please use a different email address.",
        )
        self.assertEqual(
            display_message("username", {"code": "unique"}),
            "This username is already taken. Please choose a different username.",
        )
        self.assertEqual(
            display_message("password", "validation.min.string"),
            "Password must be at least 8 characters long.",
        )
        self.assertEqual(display_message("name", "Name is too long."), "Name is too long.")

    def test_remap_field_errors(self):
        remapped = remap_field_errors({"password": ["The password field confirmation does not match."], "name": "Bad"})
        self.assertEqual(
            remapped,
            {
                "password": ["Password confirmation does not match. Please make sure both passwords are identical."],
                "name": ["Bad"],
            },
        )
