import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from settingsservice.core import Color, SettingsPanel


class _SurfaceStub:
    def __init__(self, panel: SettingsPanel | None = None, visible: bool = True) -> None:
        self.panel = panel
        self.visible = visible
        self.rebuilds: list[list] = []
        self.commits = 0

    def rebuild(self, rows) -> None:
        self.rebuilds.append(list(rows))

    def commit_visible(self) -> None:
        self.commits += 1

    def is_surface_visible(self) -> bool:
        return self.visible

    def show(self) -> None:
        self.visible = True
        if self.panel is not None:
            self.panel.surface_shown()

    def hide(self) -> None:
        self.visible = False


class _CaptureStub:
    def __init__(self) -> None:
        self.text_requests: list[tuple] = []
        self.color_requests: list[tuple] = []

    def request_text_input(self, title, current_text, max_length, on_accept, on_cancel=None) -> None:
        self.text_requests.append((title, current_text, max_length, on_accept, on_cancel))

    def request_color_input(self, title, current_color, on_accept) -> None:
        self.color_requests.append((title, current_color, on_accept))


def _five_settings(panel: SettingsPanel) -> None:
    panel.add_setting({"type": "checkbox", "name": "Wrap", "key": "wrap", "default": False})
    panel.add_setting({"type": "slider", "name": "Size", "key": "size", "default": 12, "min": 6, "max": 48})
    panel.add_setting({"type": "dropdown", "name": "Theme", "key": "theme", "options": ["Light", "Dark"]})
    panel.add_setting({"type": "textbox", "name": "Title", "key": "title", "default": "hello"})
    panel.add_setting({"type": "header", "name": "Misc"})


class DisplaySyncTests(unittest.TestCase):
    def _panel(self, **config) -> tuple[SettingsPanel, _SurfaceStub]:
        panel = SettingsPanel("Sync", {}, config)
        surface = _SurfaceStub(panel)
        panel.attach_surface(surface)
        return panel, surface

    def _row(self, panel: SettingsPanel, name: str):
        rows = panel.engine.rows_for(name)
        self.assertEqual(len(rows), 1)
        return rows[0]

    def test_attach_builds_rows_in_order(self) -> None:
        panel, surface = self._panel()
        _five_settings(panel)
        self.assertEqual([row.text for row in surface.rebuilds[-1]], ["Wrap", "Size", "Theme", "Title", "Misc"])
        self.assertEqual(self._row(panel, "Size").value_text, "12")
        self.assertEqual(self._row(panel, "Theme").value_text, "Light")

    def test_targeted_refresh_is_repaint_only(self) -> None:
        panel, surface = self._panel()
        _five_settings(panel)
        rebuilds_before = len(surface.rebuilds)
        rows_before = list(panel.engine.rows)

        panel.store["size"] = 20
        self.assertTrue(panel.refresh_setting("Size"))

        self.assertEqual(len(surface.rebuilds), rebuilds_before)
        self.assertEqual(surface.commits, 1)
        self.assertEqual([id(row) for row in panel.engine.rows], [id(row) for row in rows_before])
        self.assertEqual(self._row(panel, "Size").value_text, "20")
        self.assertEqual(self._row(panel, "Title").value_text, "hello")

    def test_refresh_without_change_skips_repaint(self) -> None:
        panel, surface = self._panel()
        _five_settings(panel)
        self.assertFalse(panel.refresh_setting("Size"))
        self.assertFalse(panel.refresh_all())
        self.assertEqual(surface.commits, 0)

    def test_refresh_all_repaints_once(self) -> None:
        panel, surface = self._panel()
        _five_settings(panel)
        panel.store["wrap"] = True
        panel.store["title"] = "changed"
        self.assertTrue(panel.refresh_all())
        self.assertEqual(surface.commits, 1)
        self.assertEqual(self._row(panel, "Wrap").value_text, "On")

    def test_refresh_is_noop_while_hidden(self) -> None:
        panel, surface = self._panel()
        _five_settings(panel)
        surface.visible = False
        panel.store["size"] = 30
        self.assertFalse(panel.refresh_setting("Size"))
        self.assertEqual(surface.commits, 0)

    def test_refresh_unknown_reference_warns(self) -> None:
        panel, _surface = self._panel()
        with self.assertLogs("settingsservice.core.sync", level="WARNING"):
            self.assertFalse(panel.refresh_setting("ghost"))

    def test_toggle_write_with_auto_sync_repaints_only(self) -> None:
        panel, surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "checkbox", "name": "Wrap", "key": "wrap", "default": False})
        rebuilds_before = len(surface.rebuilds)

        panel.activate(self._row(panel, "Wrap"))

        self.assertIs(panel.store["wrap"], True)
        self.assertEqual(surface.commits, 1)
        self.assertEqual(len(surface.rebuilds), rebuilds_before)

    def test_toggle_write_without_auto_sync_rebuilds(self) -> None:
        panel, surface = self._panel()
        panel.add_setting({"type": "checkbox", "name": "Wrap", "key": "wrap", "default": False})
        rebuilds_before = len(surface.rebuilds)

        panel.activate(self._row(panel, "Wrap"))

        self.assertIs(panel.store["wrap"], True)
        self.assertEqual(surface.commits, 0)
        self.assertEqual(len(surface.rebuilds), rebuilds_before + 1)

    def test_numeric_step_snaps_and_clamps(self) -> None:
        panel, _surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "slider", "name": "Vol", "key": "vol", "default": 9, "min": 0, "max": 10, "step": 5})
        self.assertEqual(self._row(panel, "Vol").value_text, "10")
        panel.step(self._row(panel, "Vol"), 1)
        self.assertEqual(panel.store["vol"], 10)
        panel.step(self._row(panel, "Vol"), -1)
        self.assertEqual(panel.store["vol"], 5)

    def test_choice_cycles_and_rejects_unknown_value(self) -> None:
        changes: list = []
        panel, _surface = self._panel(allowRefresh=True)
        panel.add_setting(
            {"type": "dropdown", "name": "Theme", "key": "theme", "options": ["A", "B", "C"], "onChange": changes.append}
        )
        row = self._row(panel, "Theme")
        panel.step(row, -1)
        self.assertEqual(panel.store["theme"], "C")
        with self.assertLogs("settingsservice.core.kinds", level="WARNING"):
            panel.set_row_value(row, "Z")
        self.assertEqual(panel.store["theme"], "C")
        self.assertEqual(changes, ["C"])

    def test_text_activation_uses_capture_and_truncates(self) -> None:
        capture = _CaptureStub()
        panel = SettingsPanel("Text", {}, {"allowRefresh": True}, capture=capture)
        surface = _SurfaceStub(panel)
        panel.attach_surface(surface)
        panel.add_setting({"type": "textbox", "name": "Tag", "key": "tag", "maxChars": 4})

        panel.activate(self._row(panel, "Tag"))
        title, current, max_length, on_accept, on_cancel = capture.text_requests[-1]
        self.assertEqual((title, current, max_length), ("Tag", "", 4))

        on_cancel()
        self.assertNotIn("tag", panel.store)
        on_accept("abcdefgh")
        self.assertEqual(panel.store["tag"], "abcd")
        self.assertEqual(self._row(panel, "Tag").value_text, "abcd")

    def test_color_defaults_to_white_and_commits_mapping(self) -> None:
        capture = _CaptureStub()
        panel = SettingsPanel("Color", {}, {"allowRefresh": True}, capture=capture)
        panel.attach_surface(_SurfaceStub(panel))
        panel.add_setting({"type": "colorpicker", "name": "Tint", "key": "tint"})
        self.assertEqual(panel.store["tint"], {"r": 1.0, "g": 1.0, "b": 1.0, "a": 1.0})

        panel.activate(self._row(panel, "Tint"))
        _title, current, on_accept = capture.color_requests[-1]
        self.assertEqual(current, Color(1.0, 1.0, 1.0, 1.0))
        on_accept(Color(1.0, 0.0, 0.0, 0.5))
        self.assertEqual(panel.store["tint"], {"r": 1.0, "g": 0.0, "b": 0.0, "a": 0.5})
        self.assertEqual(self._row(panel, "Tint").value_text, "#ff0000")

    def test_action_runs_callback_and_labels_are_inert(self) -> None:
        calls: list[str] = []
        panel, _surface = self._panel()
        panel.add_setting({"type": "button", "name": "Go", "onClick": lambda: calls.append("go")})
        panel.add_setting({"type": "header", "name": "Section"})
        panel.activate(self._row(panel, "Go"))
        panel.activate(self._row(panel, "Section"))
        self.assertEqual(calls, ["go"])
        self.assertFalse(panel.engine.sync_one(self._row(panel, "Section")))

    def test_unknown_kind_is_skipped_with_warning(self) -> None:
        panel, surface = self._panel()
        panel.add_setting({"type": "header", "name": "Before"})
        with self.assertLogs("settingsservice.core.sync", level="WARNING"):
            panel.add_setting({"type": "knob", "name": "Odd"})
        panel.add_setting({"type": "header", "name": "After"})
        self.assertEqual([row.text for row in surface.rebuilds[-1]], ["Before", "After"])

    def test_callback_errors_propagate(self) -> None:
        def boom(_value) -> None:
            raise RuntimeError("boom")

        panel, _surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "checkbox", "name": "Wrap", "key": "wrap", "onChange": boom})
        with self.assertLogs("settingsservice.core.kinds", level="ERROR"):
            with self.assertRaises(RuntimeError):
                panel.activate(self._row(panel, "Wrap"))
        self.assertIs(panel.store["wrap"], True)

    def test_stale_row_is_ignored(self) -> None:
        panel, _surface = self._panel()
        panel.add_setting({"type": "checkbox", "name": "Wrap", "key": "wrap"})
        row = self._row(panel, "Wrap")
        panel.remove_setting("Wrap")
        with self.assertLogs("settingsservice.core.sync", level="WARNING"):
            panel.activate(row)
        self.assertNotIn("wrap", panel.store)

    def test_fractional_step_lands_exactly_on_grid(self) -> None:
        panel, _surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "slider", "name": "Opacity", "key": "opacity", "min": 0, "max": 1, "step": 0.1})
        self.assertEqual(self._row(panel, "Opacity").value_text, "0")
        for _ in range(3):
            panel.step(self._row(panel, "Opacity"), 1)
        self.assertEqual(panel.store["opacity"], 0.3)
        self.assertEqual(self._row(panel, "Opacity").value_text, "0.3")
        for _ in range(10):
            panel.step(self._row(panel, "Opacity"), 1)
        self.assertEqual(panel.store["opacity"], 1)
        self.assertEqual(self._row(panel, "Opacity").value_text, "1")

    def test_late_text_accept_updates_rows_from_latest_rebuild(self) -> None:
        capture = _CaptureStub()
        panel = SettingsPanel("Late", {}, {"allowRefresh": True}, capture=capture)
        surface = _SurfaceStub(panel)
        panel.attach_surface(surface)
        panel.add_setting({"type": "textbox", "name": "T", "key": "t", "default": "old"})

        panel.activate(self._row(panel, "T"))
        on_accept = capture.text_requests[-1][3]
        panel.add_setting({"type": "header", "name": "Added meanwhile"})
        commits_before = surface.commits
        on_accept("new")

        self.assertEqual(panel.store["t"], "new")
        row = self._row(panel, "T")
        self.assertIn(row, surface.rebuilds[-1])
        self.assertEqual(row.value_text, "new")
        self.assertEqual(surface.commits, commits_before + 1)
        self.assertFalse(panel.refresh_setting("T"))

    def test_late_color_accept_updates_rows_from_latest_rebuild(self) -> None:
        capture = _CaptureStub()
        panel = SettingsPanel("LateColor", {}, {"allowRefresh": True}, capture=capture)
        panel.attach_surface(_SurfaceStub(panel))
        panel.add_setting({"type": "colorpicker", "name": "Tint", "key": "tint"})

        panel.activate(self._row(panel, "Tint"))
        on_accept = capture.color_requests[-1][2]
        panel.update_setting("Tint", {"tooltip": "Caret tint"})
        on_accept(Color(0.0, 0.0, 1.0))

        self.assertEqual(self._row(panel, "Tint").value_text, "#0000ff")

    def test_image_choice_cycles_over_images(self) -> None:
        panel, _surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "iconchooser", "name": "Icon", "key": "icon", "icons": ["a.png", "b.png", "c.png"]})
        row = self._row(panel, "Icon")
        self.assertEqual(row.value_text, "a.png")
        self.assertNotIn("icon", panel.store)

        panel.step(row, -1)
        self.assertEqual(panel.store["icon"], "c.png")
        panel.step(self._row(panel, "Icon"), 1)
        self.assertEqual(panel.store["icon"], "a.png")
        panel.activate(self._row(panel, "Icon"))
        self.assertEqual(panel.store["icon"], "b.png")
        self.assertEqual(self._row(panel, "Icon").value_text, "b.png")

    def test_image_choice_rejects_non_member(self) -> None:
        panel, _surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "iconchooser", "name": "Icon", "key": "icon", "icons": ["a.png", "b.png"]})
        with self.assertLogs("settingsservice.core.kinds", level="WARNING"):
            panel.set_row_value(self._row(panel, "Icon"), "z.png")
        self.assertNotIn("icon", panel.store)
        panel.set_row_value(self._row(panel, "Icon"), "b.png")
        self.assertEqual(panel.store["icon"], "b.png")

    def test_image_choice_without_images_shows_empty(self) -> None:
        panel, surface = self._panel(allowRefresh=True)
        panel.add_setting({"type": "iconchooser", "name": "Icon", "key": "icon"})
        row = self._row(panel, "Icon")
        self.assertEqual(row.value, "")
        self.assertEqual(row.value_text, "")
        panel.step(row, 1)
        panel.activate(row)
        self.assertNotIn("icon", panel.store)
        self.assertEqual(surface.commits, 0)

    def test_color_default_is_seeded_as_mapping(self) -> None:
        panel, _surface = self._panel()
        panel.add_setting({"type": "colorpicker", "name": "Tint", "key": "tint", "default": Color(1.0, 0.0, 0.0)})
        self.assertEqual(panel.store["tint"], {"r": 1.0, "g": 0.0, "b": 0.0, "a": 1.0})
        panel.store["tint"] = {"r": 0.0, "g": 1.0, "b": 0.0, "a": 1.0}
        panel.reset_to_defaults()
        self.assertEqual(panel.store["tint"], {"r": 1.0, "g": 0.0, "b": 0.0, "a": 1.0})


if __name__ == "__main__":
    unittest.main()
