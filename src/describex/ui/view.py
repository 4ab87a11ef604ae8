"""HTML projection of ``UIState``."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from describex.config import Settings
    from describex.ui.state import UIState

# Page reload interval while a submit is in flight.
BUSY_REFRESH_SECONDS = 1

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>describex</title>
{refresh}<style>
.invisible {{ display: none; }}
.loader {{ width: 24px; height: 24px; border: 4px solid #ddd; border-top-color: #333;
  border-radius: 50%; animation: spin 1s linear infinite; }}
@keyframes spin {{ to {{ transform: rotate(360deg); }} }}
.result {{ font-weight: bold; }}
</style>
</head>
<body>
<main>
<form action="/select" method="post" enctype="multipart/form-data">
<input type="file" id="file" name="file" accept="image/*" onchange="this.form.submit()">
<noscript><button type="submit">Load</button></noscript>
</form>
{image}
<form action="/mode" method="post" id="replicated_option" class="{option_class}">
<label><input type="checkbox" id="replicated" name="replicated" value="true"{checked}
 onchange="this.form.submit()"> Replicated</label>
<noscript><button type="submit">Apply</button></noscript>
</form>
<form action="/classify" method="post">
<button type="submit" id="classify" class="{button_class}"{disabled}>Classify</button>
</form>
<div id="loader" class="{loader_class}"></div>
<div id="message">{message}{result}</div>
</main>
</body>
</html>
"""


def _class(base: str, *, visible: bool) -> str:
    return base if visible else f"{base} invisible"


def render_page(state: UIState, settings: Settings) -> str:
    """Render the full page for ``state``."""
    image = ""
    if state.preview_url is not None:
        image = f'<img id="image" class="image" width="{settings.preview_width}" src="{escape(state.preview_url)}">'
    result = ""
    if state.result is not None:
        result = f'<p class="result">{escape(state.result)}</p>'

    return _PAGE.format(
        refresh=f'<meta http-equiv="refresh" content="{BUSY_REFRESH_SECONDS}">\n' if state.busy else "",
        image=image,
        option_class=_class("option", visible=state.mode_toggle_visible),
        checked=" checked" if state.replicated else "",
        button_class=_class("clean-button", visible=state.submit_enabled),
        disabled="" if state.submit_enabled else " disabled",
        loader_class=_class("loader", visible=state.busy),
        message=escape(state.message),
        result=result,
    )
