"""Tests for screen behaviour driven through the navigator."""

import json

import pytest

from ftool.core.filters import OPERATORS, OperatorKind
from ftool.core.inspector import InspectorTab
from ftool.core.navigation import KeyEvent, Navigator
from ftool.exceptions import EngineError, EngineErrorKind, TilesError
from ftool.engine.tippecanoe import Preset
from ftool.screens import (
    DataInspectorScreen,
    FileBrowserScreen,
    FilterEditorScreen,
    FilterField,
    HomeScreen,
    JsonInspectorScreen,
    JsonTab,
    TilesConfigScreen,
    initial_stack,
)
from ftool.tui.render import render_screen


def press(navigator, *keys):
    """Send keys; single printable characters carry themselves as text."""
    for key in keys:
        character = key if len(key) == 1 else None
        navigator.dispatch(KeyEvent(key, character))


def type_text(navigator, text):
    for ch in text:
        navigator.dispatch(KeyEvent(ch, ch))


def select_operator(navigator, op):
    """Move the operator list from the first entry to ``op``."""
    press(navigator, *["down"] * OPERATORS.index(OperatorKind.parse(op)))


@pytest.fixture
def inspector_nav(services, people_csv):
    screen = DataInspectorScreen.open(services, people_csv)
    navigator = Navigator([HomeScreen(services=services, start_dir=people_csv.parent), screen])
    yield navigator, screen
    if navigator.running:
        press(navigator, "ctrl+c")


# Home and browser


def test_home_opens_browser(services, data_dir, people_csv):
    home = HomeScreen(services=services, start_dir=data_dir)
    navigator = Navigator([home])

    press(navigator, "down", "enter")
    browser = navigator.top
    assert isinstance(browser, FileBrowserScreen)
    assert browser.cwd == data_dir.resolve()
    assert [e.name for e in browser.entries] == ["..", "people.csv"]


def test_browser_orders_entries(services, tmp_path):
    (tmp_path / "b_dir").mkdir()
    (tmp_path / "A_dir").mkdir()
    (tmp_path / "z.csv").write_text("a\n1\n")
    (tmp_path / "B.json").write_text("{}")
    (tmp_path / ".hidden").write_text("")

    browser = FileBrowserScreen.open(services, tmp_path)
    assert [e.name for e in browser.entries] == ["..", "A_dir", "b_dir", "B.json", "z.csv"]


def test_browser_enters_and_leaves_directories(services, tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    browser = FileBrowserScreen.open(services, tmp_path)
    navigator = Navigator([browser])

    press(navigator, "down", "enter")
    assert browser.cwd == sub.resolve()

    press(navigator, "enter")  # ".."
    assert browser.cwd == tmp_path.resolve()
    assert browser.selected_entry.name == "sub"


def test_browser_unsupported_file(services, tmp_path):
    (tmp_path / "notes.txt").write_text("hello")
    browser = FileBrowserScreen.open(services, tmp_path)
    navigator = Navigator([browser])

    press(navigator, "down", "enter")
    assert navigator.depth == 1
    assert browser.notice.is_error
    assert "Unsupported file type: .txt" in browser.notice.body

    press(navigator, "escape")
    assert browser.notice is None
    assert navigator.depth == 1


def test_browser_shows_parse_errors(services, tmp_path):
    (tmp_path / "broken.json").write_text('{"a": ')
    browser = FileBrowserScreen.open(services, tmp_path)
    navigator = Navigator([browser])

    press(navigator, "down", "enter")
    assert navigator.depth == 1
    assert "Invalid JSON" in browser.notice.body


def test_browser_shows_engine_errors(services, tmp_path):
    (tmp_path / "bad.parquet").write_bytes(b"garbage")
    browser = FileBrowserScreen.open(services, tmp_path)
    navigator = Navigator([browser])

    press(navigator, "down", "enter")
    assert navigator.depth == 1
    assert browser.notice.is_error


def test_browser_opens_inspectors(services, data_dir, people_csv, sample_json):
    browser = FileBrowserScreen.open(services, data_dir)
    navigator = Navigator([browser])
    names = [e.name for e in browser.entries]

    browser.selected_index = names.index("people.csv")
    press(navigator, "enter")
    assert isinstance(navigator.top, DataInspectorScreen)

    press(navigator, "escape")
    browser.selected_index = names.index("config.json")
    press(navigator, "enter")
    assert isinstance(navigator.top, JsonInspectorScreen)


# Data inspector


def test_inspector_opens_on_first_page(inspector_nav, people):
    _, screen = inspector_nav
    assert screen.active_tab is InspectorTab.SCHEMA
    assert screen.page.page_index == 0
    assert len(screen.page.rows) == 50
    assert screen.total_rows == len(people)
    assert [e.name for e in screen.schema] == ["id", "name", "age", "city"]


def test_next_page_clamps(inspector_nav):
    navigator, screen = inspector_nav
    press(navigator, "tab")
    assert screen.active_tab is InspectorTab.PREVIEW

    press(navigator, "right", "right", "right", "right")
    assert screen.page.page_index == 2
    assert len(screen.page.rows) == 20

    press(navigator, "left", "left", "left")
    assert screen.page.page_index == 0


def test_tab_switch_keeps_page(inspector_nav):
    navigator, screen = inspector_nav
    press(navigator, "tab", "right")
    page = screen.page
    press(navigator, "tab", "tab")
    assert screen.page is page


def test_filter_scenario(inspector_nav, people):
    """Test building age > 30 AND age < 50 in the editor and applying it."""
    navigator, screen = inspector_nav
    press(navigator, "tab", "right")
    press(navigator, "f")
    editor = navigator.top
    assert isinstance(editor, FilterEditorScreen)

    press(navigator, "down", "down")  # age
    press(navigator, "tab")
    select_operator(navigator, ">")
    press(navigator, "tab")
    type_text(navigator, "30")
    press(navigator, "enter")
    assert len(editor.draft_conditions) == 1
    assert editor.field_cursor is FilterField.COLUMN

    press(navigator, "tab", "down")  # > to <
    press(navigator, "tab")
    type_text(navigator, "50")
    press(navigator, "enter")
    press(navigator, "tab", "tab")
    press(navigator, "enter")  # empty value applies

    assert navigator.top is screen
    assert len(screen.filter) == 2
    assert screen.page.page_index == 0
    assert screen.total_rows == sum(1 for r in people if 30 < r[2] < 50)
    assert all(30 < row[2] < 50 for row in screen.page.rows)


def test_filter_cancel_leaves_inspector(inspector_nav):
    """Test escape from the editor leaves page and filter as they were."""
    navigator, screen = inspector_nav
    press(navigator, "tab", "right")
    before = (screen.page, screen.filter.conditions, screen.active_tab, screen.scroll)

    press(navigator, "f", "tab", "tab")
    type_text(navigator, "qqq")
    press(navigator, "enter")
    assert navigator.running
    press(navigator, "escape")

    assert navigator.top is screen
    assert (screen.page, screen.filter.conditions, screen.active_tab, screen.scroll) == before


def test_filter_unary_skips_value(inspector_nav, people):
    navigator, screen = inspector_nav
    press(navigator, "tab", "f")
    editor = navigator.top

    press(navigator, *["down"] * 3)  # city
    press(navigator, "tab")
    select_operator(navigator, "IS NULL")
    press(navigator, "tab")
    assert editor.field_cursor is FilterField.COLUMN

    press(navigator, "tab", "enter")
    assert editor.draft_conditions[0].value is None

    press(navigator, "a")
    assert screen.total_rows == sum(1 for r in people if r[3] is None)


def test_filter_editor_inline_error():
    editor = FilterEditorScreen.for_columns(("age",))
    editor.field_cursor = FilterField.VALUE
    assert not editor.add_condition()
    assert editor.error == "Operator = requires a value"
    assert editor.draft_conditions == ()


def test_filter_editor_remove_last(inspector_nav):
    navigator, screen = inspector_nav
    press(navigator, "tab", "f")
    editor = navigator.top
    press(navigator, "tab", "tab")
    type_text(navigator, "7")
    press(navigator, "enter")
    assert len(editor.draft_conditions) == 1

    press(navigator, "d")
    assert editor.draft_conditions == ()


def test_convert_confirm(inspector_nav, people_csv):
    navigator, screen = inspector_nav
    press(navigator, "c")
    assert screen.pending_convert == "parquet"

    press(navigator, "enter")
    assert screen.pending_convert is None
    assert not screen.notice.is_error
    assert people_csv.with_suffix(".parquet").exists()
    assert screen.source_path == people_csv


def test_convert_cancel(inspector_nav, people_csv):
    navigator, screen = inspector_nav
    press(navigator, "c", "escape")
    assert screen.pending_convert is None
    assert screen.notice is None
    assert not people_csv.with_suffix(".parquet").exists()


def test_failed_fetch_keeps_page(inspector_nav, monkeypatch):
    navigator, screen = inspector_nav
    press(navigator, "tab")
    page = screen.page

    def fail(*args, **kwargs):
        raise EngineError(EngineErrorKind.TIMEOUT, "Fetching rows timed out")

    monkeypatch.setattr(screen.inspector, "fetch_page", fail)
    press(navigator, "right")
    assert screen.page is page
    assert screen.notice.body == "Fetching rows timed out"


def test_leaving_inspector_closes_engine(inspector_nav):
    navigator, screen = inspector_nav
    press(navigator, "escape")
    assert isinstance(navigator.top, HomeScreen)
    assert screen.inspector.engine._conn is None


# JSON inspector


def test_json_tabs_and_toggle(services, sample_json):
    screen = JsonInspectorScreen.open(services, sample_json)
    navigator = Navigator([screen])
    assert screen.tabs == (JsonTab.TREE, JsonTab.RAW)
    total = len(screen.tree.flatten())

    press(navigator, "enter")  # root
    assert len(screen.tree.flatten()) == 1
    press(navigator, "enter")
    assert len(screen.tree.flatten()) == total

    press(navigator, "tab")
    assert screen.active_tab is JsonTab.RAW
    assert screen.raw_lines[0] == "{"

    press(navigator, "p")
    assert navigator.depth == 1


def test_geojson_tabs(services, sample_geojson):
    screen = JsonInspectorScreen.open(services, sample_geojson)
    navigator = Navigator([screen])
    assert screen.geojson
    assert screen.active_tab is JsonTab.SUMMARY

    press(navigator, "tab")
    assert screen.active_tab is JsonTab.FEATURES
    press(navigator, "down", "down", "down")
    assert screen.cursor == 2

    press(navigator, "p")
    assert isinstance(navigator.top, TilesConfigScreen)


def test_geojson_detected_by_content(services, tmp_path, geojson_value):
    path = tmp_path / "plain.json"
    path.write_text(json.dumps(geojson_value))
    assert JsonInspectorScreen.open(services, path).geojson


def test_deeply_nested_json_never_crashes(services, tmp_path):
    """Test a 2000-level document opens or reports a notice."""
    depth = 2000
    path = tmp_path / "deep.json"
    path.write_text("[" * depth + "]" * depth)
    browser = FileBrowserScreen.open(services, tmp_path)
    navigator = Navigator([browser])

    navigator.apply(browser.open_file(path))

    if browser.notice is None:
        screen = navigator.top
        assert isinstance(screen, JsonInspectorScreen)
        assert screen.tree.node_count() == depth
        assert len(screen.raw_lines) == 2 * depth - 1
        press(navigator, "tab")
        assert screen.active_tab is JsonTab.RAW
    else:
        assert "nested too deeply" in browser.notice.body
        assert navigator.top is browser


def test_geojson_views_are_computed_once(services, sample_geojson, monkeypatch):
    """Test key presses on the Features tab reuse the table built at open."""
    screen = JsonInspectorScreen.open(services, sample_geojson)
    navigator = Navigator([screen])
    assert screen.feature_table[0] == ["name", "pop", "lanes"]
    assert screen.geo_summary.feature_count == 3

    def fail(self):
        raise AssertionError("features recomputed")

    monkeypatch.setattr(type(screen.tree), "features", fail)
    monkeypatch.setattr(type(screen.tree), "feature_rows", fail)
    press(navigator, "tab", "down", "down")
    assert screen.active_tab is JsonTab.FEATURES
    assert screen.cursor == 2
    assert render_screen(screen) is not None


# PMTiles


class FakeTiles:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def run(self, source, config):
        self.calls.append((source, config))
        if self.error:
            raise self.error
        return source.with_suffix(".pmtiles")


def test_tiles_presets_and_zooms(services, sample_geojson):
    screen = TilesConfigScreen(services=services, source_path=sample_geojson)
    navigator = Navigator([screen])

    press(navigator, "right")
    assert screen.preset is Preset.GENERIC
    assert (screen.config.min_zoom, screen.config.max_zoom) == (6, 18)

    press(navigator, "down", "right")
    assert screen.config.min_zoom == 7
    assert screen.preset is Preset.CUSTOM

    press(navigator, "down", *["right"] * 10)
    assert screen.config.max_zoom == 24

    press(navigator, "down", "space")
    assert screen.config.no_feature_limit


def test_tiles_generate(services, sample_geojson):
    services.tiles = FakeTiles()
    screen = TilesConfigScreen(services=services, source_path=sample_geojson)
    navigator = Navigator([screen])

    press(navigator, "enter")
    assert services.tiles.calls == [(sample_geojson, screen.config)]
    assert "places.pmtiles" in screen.notice.body


def test_tiles_failure(services, sample_geojson):
    services.tiles = FakeTiles(TilesError("tippecanoe is not installed or not on PATH"))
    screen = TilesConfigScreen(services=services, source_path=sample_geojson)
    press(Navigator([screen]), "enter")
    assert screen.notice.is_error
    assert "not installed" in screen.notice.body


# Start paths


def test_initial_stack(services, data_dir, people_csv, sample_json):
    assert [type(s) for s in initial_stack(services, None, data_dir)] == [HomeScreen]
    assert [type(s) for s in initial_stack(services, data_dir, data_dir)] == [
        HomeScreen,
        FileBrowserScreen,
    ]

    stack = initial_stack(services, people_csv, data_dir)
    assert [type(s) for s in stack] == [HomeScreen, FileBrowserScreen, DataInspectorScreen]
    assert stack[1].selected_entry.name == "people.csv"
    stack[2].dispose()

    stack = initial_stack(services, sample_json, data_dir)
    assert isinstance(stack[-1], JsonInspectorScreen)


def test_initial_stack_unsupported(services, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("x")
    stack = initial_stack(services, path, tmp_path)
    assert [type(s) for s in stack] == [HomeScreen, FileBrowserScreen]
    assert stack[1].notice.is_error
