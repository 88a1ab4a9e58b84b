"""
Portfolio Site - content pipeline for a personal portfolio and blog.

This package loads the JSON manifests and Markdown posts of a static
portfolio site, renders the blog, projects and publications listings, an
article page per post and an RSS feed.

Main entry point is the CLI via the `portfolio-site build` command.

Example:
    $ portfolio-site build -s https://taufiq-ai.github.io -o out/
"""

__all__ = [
    "__version__",
    "Collection",
    "ContentLoader",
    "Entry",
    "FetchError",
    "NotFoundError",
    "parse_frontmatter",
    "slugify",
]
__version__ = "0.1.0"

from .core import Collection, Entry, parse_frontmatter, slugify
from .errors import FetchError, NotFoundError
from .loader import ContentLoader
