import pytest

from core.entity_normalizer import EntityNormalizer


@pytest.fixture
def normalizer():
    return EntityNormalizer()


@pytest.mark.parametrize("raw", [
    "a&nbsp;b",
    "a\u00a0b",
    "a&#160;b",
    "a&#xA0;b",
    "a&#xa0;b",
    "a&#X00A0;b",
    "a&#0160;b",
    "a&NonBreakingSpace;b",
])
def test_every_nbsp_form_becomes_a_space(normalizer, raw):
    assert normalizer.normalize(raw) == "a b"


@pytest.mark.parametrize("raw, expected", [
    ("a&nbsp b", "a  b"),
    ("a&#160b", "a b"),
    ("a&#xA0<b>", "a <b>"),
])
def test_forms_without_semicolon(normalizer, raw, expected):
    assert normalizer.normalize(raw) == expected


def test_counts_replacements(normalizer):
    text, count = normalizer.normalize_with_count("<p>&nbsp;x\u00a0y&#160;</p>")
    assert text == "<p> x y </p>"
    assert count == 3


@pytest.mark.parametrize("raw", ["&nbspx", "?a=1&nbsp=2", "&#1600;", "&#xA0F;", "&nbsp1"])
def test_longer_references_are_not_split(normalizer, raw):
    assert normalizer.normalize(raw) == raw


def test_escaped_entity_text_is_left_alone(normalizer):
    assert normalizer.normalize("&amp;nbsp;") == "&amp;nbsp;"


def test_other_entities_untouched(normalizer):
    assert normalizer.normalize("&amp; &lt;b&gt; &#169;") == "&amp; &lt;b&gt; &#169;"


@pytest.mark.parametrize("value", ["", None, 42])
def test_empty_or_non_string_returned_unchanged(normalizer, value):
    assert normalizer.normalize(value) == value
    assert normalizer.normalize_with_count(value) == (value, 0)
