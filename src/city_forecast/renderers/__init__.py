"""Pure rendering functions: schemas -> text or HTML strings.

All renderers follow the same pattern:
  - Input: schema objects (from analysis/ or the view models)
  - Output: str (HTML fragment or terminal text)
  - No side effects, no I/O, no Prefect decorators

Public API:
  - page: build_current_html, build_daily_html, build_page_html
  - text: format_current, format_daily, format_cities, format_search_results
  - weather_utils: icon_emoji, condition_emoji, c_to_f, ms_to_kmh, ms_to_mph,
    wind_direction
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
