"""
Page scripts for the "open image viewer" shortcut.

The target is a GWT-based study list: the shortcut selects the first study
row, waits briefly for the selection to apply, then clicks the eye icon
("image viewer" / "Load selected study").  The selectors are specific to
that page's markup; when they stop matching, the scripts report ok=false
instead of raising.

Both scripts are synchronous expressions that evaluate to
``{ok: bool, error: string|null}`` so QWebEnginePage.runJavaScript() can
hand the result straight back to Python.
"""

import json
from string import Template
from typing import Sequence

__all__ = [
    "PREFERRED_ROW_SELECTORS",
    "ROW_SELECTORS",
    "ICON_SELECTORS",
    "STYLE_RESET_SCRIPT",
    "build_row_click_script",
    "build_icon_click_script",
]

# Explicit first data row of a GWT CellTable — tried before any scanning
PREFERRED_ROW_SELECTORS = (
    'tbody tr[__gwt_row="0"][__gwt_subrow="0"]',
    'tbody tr[__gwt_row="0"]',
)

# Fallback candidates; the visible one closest to the top wins
ROW_SELECTORS = (
    'tbody tr[__gwt_row="0"][__gwt_subrow="0"]',
    'tbody tr[__gwt_row="0"]',
    ".gwt-ScrollTable table tbody tr",
    "table tbody tr",
    '[role="row"]',
    "tr",
)

ICON_SELECTORS = (
    'img[title*="image viewer" i]',
    '[title*="image viewer" i]',
    'img[alt*="image viewer" i]',
    'img[title*="Load selected study" i]',
    '[title*="Load selected study" i]',
)

# Candidate rows smaller than this are headers, spacers or hidden
_MIN_ROW_WIDTH = 40
_MIN_ROW_HEIGHT = 18

_ROW_CLICK_TEMPLATE = Template("""
(function () {
    try {
        var preferred = $preferred;
        var candidates = $candidates;
        var best = null;
        for (var p = 0; p < preferred.length && !best; p++) {
            best = document.querySelector(preferred[p]);
        }
        if (!best) {
            var bestTop = Infinity;
            for (var s = 0; s < candidates.length; s++) {
                var nodes = document.querySelectorAll(candidates[s]);
                for (var i = 0; i < nodes.length; i++) {
                    var el = nodes[i];
                    if (!el.querySelector || !el.querySelector('td')) continue;
                    var r = el.getBoundingClientRect();
                    if (r.height < $min_height || r.width < $min_width) continue;
                    if (r.top < 0) continue;
                    var style = window.getComputedStyle(el);
                    if (style.display === 'none' || style.visibility === 'hidden') continue;
                    if (r.top < bestTop) { bestTop = r.top; best = el; }
                }
            }
        }
        if (!best) return {ok: false, error: 'No study row found'};
        var target = best.querySelector('td:nth-child(3) div[__gwt_cell], td:nth-child(3)') || best;
        target.scrollIntoView({block: 'center'});
        ['mousedown', 'mouseup', 'click'].forEach(function (type) {
            target.dispatchEvent(new MouseEvent(type, {bubbles: true}));
        });
        return {ok: true, error: null};
    } catch (e) {
        return {ok: false, error: String(e && e.message || e)};
    }
})();
""")

_ICON_CLICK_TEMPLATE = Template("""
(function () {
    try {
        var selectors = $selectors;
        for (var i = 0; i < selectors.length; i++) {
            var el = document.querySelector(selectors[i]);
            if (el) { el.click(); return {ok: true, error: null}; }
        }
        return {ok: false, error: null};
    } catch (e) {
        return {ok: false, error: String(e && e.message || e)};
    }
})();
""")

STYLE_RESET_SCRIPT = """
(function () {
    var style = document.createElement('style');
    style.textContent = 'body { margin: 0 !important; padding: 0 !important; }';
    (document.head || document.documentElement).appendChild(style);
})();
"""


def build_row_click_script(
    preferred: Sequence[str] = PREFERRED_ROW_SELECTORS,
    candidates: Sequence[str] = ROW_SELECTORS,
) -> str:
    """Return the script that selects the first study row."""
    return _ROW_CLICK_TEMPLATE.substitute(
        preferred=json.dumps(list(preferred)),
        candidates=json.dumps(list(candidates)),
        min_width=_MIN_ROW_WIDTH,
        min_height=_MIN_ROW_HEIGHT,
    )


def build_icon_click_script(selectors: Sequence[str] = ICON_SELECTORS) -> str:
    """Return the script that clicks the first matching image-viewer icon."""
    return _ICON_CLICK_TEMPLATE.substitute(selectors=json.dumps(list(selectors)))
