"""
HTML rendering for listings and entry pages.

All markup is produced from Jinja2 templates in ``portfolio_site/templates``
with autoescaping enabled for HTML and XML.
"""

from .environment import TEMPLATE_DIR, build_environment
from .listing import ListPage, ListRenderer, PageLink, is_reserved_page_name, pagination_window
from .detail import DetailRenderer, DetailView, NavLink

__all__ = [
    "TEMPLATE_DIR",
    "build_environment",
    "ListPage",
    "ListRenderer",
    "PageLink",
    "pagination_window",
    "is_reserved_page_name",
    "DetailRenderer",
    "DetailView",
    "NavLink",
]
