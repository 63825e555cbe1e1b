"""
Unit tests for src/viewer/ — models, URL checks and page scripts (no Qt).

Coverage plan
─────────────
models.py  → 6 tests  (ProbeResult conversion, layout / collapsed bounds)
urls.py    → 4 tests
probe.py   → 4 tests  (selector priority, script shape)
"""

import json

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# 1. Models
# ─────────────────────────────────────────────────────────────────────────────

class TestProbeResult:

    def test_from_dict_value(self):
        from src.viewer.models import ProbeResult
        assert ProbeResult.from_script_value({"ok": True, "error": None}) == ProbeResult(ok=True)

    def test_from_dict_with_error(self):
        from src.viewer.models import ProbeResult
        result = ProbeResult.from_script_value({"ok": False, "error": "boom"})
        assert result.ok is False
        assert result.error == "boom"

    def test_from_bool_value(self):
        from src.viewer.models import ProbeResult
        assert ProbeResult.from_script_value(True).ok is True

    def test_none_value_is_failure(self):
        from src.viewer.models import ProbeResult
        result = ProbeResult.from_script_value(None)
        assert result.ok is False
        assert result.error


class TestBounds:

    def test_layout_bounds_fill_area_right_of_panel(self):
        from src.viewer.models import Bounds, layout_bounds
        assert layout_bounds(1400, 900, 400) == Bounds(x=400, y=0, width=1000, height=900)

    def test_layout_bounds_never_negative(self):
        from src.viewer.models import layout_bounds
        assert layout_bounds(300, 900, 400).width == 0

    def test_collapsed_bounds_are_zero_sized(self):
        from src.viewer.models import Bounds, collapsed_bounds
        assert collapsed_bounds(1400) == Bounds(x=1400, y=0, width=0, height=0)


# ─────────────────────────────────────────────────────────────────────────────
# 2. URL checks
# ─────────────────────────────────────────────────────────────────────────────

class TestNormalizeUrl:

    @pytest.mark.parametrize("url", [
        "https://pacs.example/",
        "http://10.0.0.1:8080/viewer",
        "file:///tmp/index.html",
        "about:blank",
    ])
    def test_accepts_urls(self, url):
        from src.viewer.urls import normalize_url
        assert normalize_url(url) == url

    def test_strips_whitespace(self):
        from src.viewer.urls import normalize_url
        assert normalize_url("  https://a.example  ") == "https://a.example"

    def test_blank_raises_enter_url(self):
        from src.viewer.urls import normalize_url
        from src.exceptions import InvalidUrlError
        with pytest.raises(InvalidUrlError, match="Please enter a URL"):
            normalize_url("")

    @pytest.mark.parametrize("text", ["pacs.example", "localhost:8080", "http://", "just words"])
    def test_rejects_non_urls(self, text):
        from src.viewer.urls import normalize_url
        from src.exceptions import InvalidUrlError
        with pytest.raises(InvalidUrlError, match="valid URL"):
            normalize_url(text)


# ─────────────────────────────────────────────────────────────────────────────
# 3. Page scripts
# ─────────────────────────────────────────────────────────────────────────────

class TestProbeScripts:

    def test_preferred_rows_come_first(self):
        from src.viewer.probe import PREFERRED_ROW_SELECTORS, ROW_SELECTORS
        assert ROW_SELECTORS[:len(PREFERRED_ROW_SELECTORS)] == PREFERRED_ROW_SELECTORS
        assert ROW_SELECTORS[-1] == "tr"

    def test_row_script_embeds_selectors_as_json(self):
        from src.viewer.probe import ROW_SELECTORS, build_row_click_script
        script = build_row_click_script()
        assert json.dumps(list(ROW_SELECTORS)) in script
        assert "mousedown" in script and "mouseup" in script
        assert "td:nth-child(3)" in script
        assert "$" not in script

    def test_icon_script_uses_given_selectors_in_order(self):
        from src.viewer.probe import build_icon_click_script
        script = build_icon_click_script(["#first", "#second"])
        assert '["#first", "#second"]' in script
        assert "el.click()" in script

    def test_default_icon_selectors_target_image_viewer(self):
        from src.viewer.probe import ICON_SELECTORS
        assert ICON_SELECTORS[0] == 'img[title*="image viewer" i]'
        assert any("Load selected study" in s for s in ICON_SELECTORS)
