from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.dates import format_date

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def build_environment() -> Environment:
    """Create the Jinja2 environment shared by every renderer."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_date"] = format_date
    return env
