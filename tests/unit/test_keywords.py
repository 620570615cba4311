"""Unit tests for keyword extraction."""

import pytest

from lettersmith.contexts.targeting.keywords import STOP_WORDS, extract_keywords


@pytest.mark.unit
def test_extract_keywords_basic():
    """Test lower-casing, stop words and short-token removal."""
    keywords = extract_keywords("Built APIs in Go and Python for the team")

    assert keywords == {"built", "apis", "python", "team"}


@pytest.mark.unit
def test_extract_keywords_empty_input():
    """Test that empty and punctuation-only text yield an empty set."""
    assert extract_keywords("") == frozenset()
    assert extract_keywords("!!! --- ... ???") == frozenset()


@pytest.mark.unit
def test_extract_keywords_deduplicates_case_insensitively():
    assert extract_keywords("Python python PYTHON") == {"python"}


@pytest.mark.unit
def test_extract_keywords_drops_all_stop_words():
    """Test that every stop word is removed, even the ones longer than two characters."""
    assert extract_keywords(" ".join(sorted(STOP_WORDS))) == frozenset()


@pytest.mark.unit
def test_extract_keywords_length_threshold():
    """Test that tokens of length 3 are kept and length 2 are dropped."""
    keywords = extract_keywords("go ml api sql")

    assert keywords == {"api", "sql"}


@pytest.mark.unit
def test_extract_keywords_splits_on_non_word_characters():
    """Test splitting on punctuation while keeping underscores and digits inside tokens."""
    keywords = extract_keywords("node.js/react, snake_case k8s (TypeScript)")

    assert keywords == {"node", "react", "snake_case", "k8s", "typescript"}


@pytest.mark.unit
def test_extract_keywords_unicode_letters():
    """Test that accented letters count as word characters."""
    assert extract_keywords("Café naïve résumé") == {"café", "naïve", "résumé"}


@pytest.mark.unit
def test_extract_keywords_returns_frozenset():
    keywords = extract_keywords("Kubernetes engineer")

    assert isinstance(keywords, frozenset)
    assert all(token == token.lower() for token in keywords)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "Built APIs in Go and Python for the team",
        "node.js/react, snake_case k8s (TypeScript)!!",
        "Café naïve résumé über Straße",
        "the and for with from this that",
        "go ml ai ux QA db",
        "",
    ],
)
def test_extract_keywords_idempotent_subset(text):
    """Test that re-extracting from the joined keywords never adds new ones."""
    keywords = extract_keywords(text)

    assert extract_keywords(" ".join(sorted(keywords))) <= keywords
