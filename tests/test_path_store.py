import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from settingsservice.app_settings import MISSING, apply_defaults, get_path, set_path, split_path


class PathStoreTests(unittest.TestCase):
    def test_split_path_drops_empty_segments(self) -> None:
        self.assertEqual(split_path("a..b."), ["a", "b"])
        self.assertEqual(split_path(""), [])

    def test_set_then_get_on_empty_and_populated_stores(self) -> None:
        for store in ({}, {"other": {"x": 1}, "top": 3}):
            set_path(store, "display.font.size", 14)
            self.assertEqual(get_path(store, "display.font.size"), 14)
        self.assertEqual(store["other"], {"x": 1})
        self.assertEqual(store["top"], 3)

    def test_missing_segments_return_missing(self) -> None:
        store = {"a": {"b": 1}}
        self.assertIs(get_path(store, "a.c"), MISSING)
        self.assertIs(get_path(store, "x.y"), MISSING)
        self.assertIs(get_path(store, ""), MISSING)
        self.assertFalse(MISSING)

    def test_non_mapping_before_end_is_missing(self) -> None:
        store = {"a": 5}
        self.assertIs(get_path(store, "a.b"), MISSING)

    def test_stored_none_is_returned_as_is(self) -> None:
        store = {"a": None}
        self.assertIsNone(get_path(store, "a"))

    def test_set_replaces_non_mapping_intermediate(self) -> None:
        store = {"a": "text"}
        set_path(store, "a.b", True)
        self.assertEqual(store, {"a": {"b": True}})

    def test_set_empty_path_raises(self) -> None:
        with self.assertRaises(ValueError):
            set_path({}, "", 1)

    def test_apply_defaults_never_overwrites(self) -> None:
        store = {"ui": {"scale": 2}, "name": "mine"}
        defaults = {"ui": {"scale": 1, "theme": "dark"}, "name": "default", "list": [1, 2]}
        apply_defaults(store, defaults)
        self.assertEqual(store["ui"], {"scale": 2, "theme": "dark"})
        self.assertEqual(store["name"], "mine")
        self.assertEqual(store["list"], [1, 2])
        self.assertIsNot(store["list"], defaults["list"])

    def test_apply_defaults_is_idempotent(self) -> None:
        defaults = {"a": {"b": {"c": 1}}, "d": 2}
        store: dict = {}
        apply_defaults(store, defaults)
        first = repr(store)
        apply_defaults(store, defaults)
        self.assertEqual(repr(store), first)

    def test_apply_defaults_leaves_scalar_where_subtree_expected(self) -> None:
        store = {"a": 5}
        apply_defaults(store, {"a": {"b": 1}})
        self.assertEqual(store, {"a": 5})


if __name__ == "__main__":
    unittest.main()
