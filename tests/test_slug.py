import pytest

from portfolio_site.core.slug import slugify

TITLES = [
    "Hello, World!",
    "Building RAG -- Pipelines  in   2024",
    "  -Intro- ",
    "What's new in Python 3.13?",
    "snake_case title",
    "Café au lait",
    "",
    "---",
]


def test_slugify_basic_title():
    assert slugify("Hello, World!") == "hello-world"


def test_slugify_collapses_whitespace_and_hyphens():
    assert slugify("Building RAG -- Pipelines  in   2024") == "building-rag-pipelines-in-2024"


def test_slugify_trims_edge_hyphens():
    assert slugify("  -Intro- ") == "intro"
    assert slugify("---") == ""


def test_slugify_keeps_word_characters():
    assert slugify("snake_case title") == "snake_case-title"
    assert slugify("What's new in Python 3.13?") == "whats-new-in-python-313"


@pytest.mark.parametrize("title", TITLES)
def test_slugify_is_idempotent(title):
    once = slugify(title)
    assert slugify(once) == once


@pytest.mark.parametrize("title", TITLES)
def test_slugify_is_deterministic(title):
    assert len({slugify(title) for _ in range(5)}) == 1


def test_slugify_drops_non_ascii_letters():
    assert slugify("Café au lait") == "caf-au-lait"
    assert slugify("Über Naïve Résumé") == "ber-nave-rsum"


def test_slugify_treats_unicode_spaces_as_separators():
    assert slugify("Deep\u00a0Learning\u2003Notes") == "deep-learning-notes"
