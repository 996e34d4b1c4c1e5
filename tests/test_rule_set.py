import re

import pytest

from core.errors import RuleConfigError
from core.rule_set import ArtifactRuleSet


@pytest.fixture
def rules():
    return ArtifactRuleSet.preset("standard")


def test_rule_set_is_immutable(rules):
    with pytest.raises(AttributeError):
        rules.prune_empty_blocks = False


def test_vendor_class_match_is_case_insensitive_substring(rules):
    assert rules.is_vendor_class("MsoNormal")
    assert rules.is_vendor_class("msonormal")
    assert rules.is_vendor_class("xMSONORMALx")
    assert rules.is_vendor_class("SCXW123456")
    assert not rules.is_vendor_class("lead")
    assert not rules.is_vendor_class("highlight")


def test_word_ids(rules):
    assert rules.should_remove_attr("id", "OLE_LINK1")
    assert rules.should_remove_attr("id", "_Toc12345")
    assert rules.should_remove_attr("id", "_Ref")
    assert rules.should_remove_attr("id", "WordSection1")
    assert rules.should_remove_attr("id", "OfficeHeader")
    assert not rules.should_remove_attr("id", "customAnchor")
    assert not rules.should_remove_attr("id", "password")
    assert not rules.should_remove_attr("id", "OLE_LINKS_PAGE")


def test_mso_anchor_names(rules):
    assert rules.should_remove_attr("name", "_Hlk98765")
    assert rules.should_remove_attr("name", "_GoBack")
    assert not rules.should_remove_attr("name", "email")


def test_unconditional_event_and_namespace_attrs(rules):
    assert rules.should_remove_attr("lang", "en")
    assert rules.should_remove_attr("paraid", "1234")
    assert rules.should_remove_attr("onclick", "alert(1)")
    assert rules.should_remove_attr("onmouseover", "")
    assert rules.should_remove_attr("xmlns", "urn:schemas-microsoft-com:office:office")
    assert rules.should_remove_attr("xmlns:o", "urn:schemas-microsoft-com:office:office")
    assert rules.should_remove_attr("o:spid", "_x0000_s1025")
    assert not rules.should_remove_attr("href", "https://example.com")
    assert not rules.should_remove_attr("title", "Office hours")


def test_legacy_clean_style_only_strips_two_letter_lang():
    legacy = ArtifactRuleSet.preset("legacy_clean_style")
    assert legacy.should_remove_attr("lang", "en")
    assert not legacy.should_remove_attr("lang", "en-US")
    assert not legacy.should_remove_attr("onclick", "x()")


def test_from_options_accepts_camel_case_and_inherits_the_rest():
    custom = ArtifactRuleSet.from_options({
        "vendorClassSubstrings": ["GDoc"],
        "wordIdPattern": r"^docs-internal-",
    })
    assert custom.vendor_class_substrings == frozenset({"gdoc"})
    assert custom.should_remove_attr("id", "docs-internal-guid-1")
    # inherited from standard
    assert "lang" in custom.unconditional_remove_attrs
    assert custom.prune_empty_blocks is True


def test_unknown_option_rejected():
    with pytest.raises(RuleConfigError):
        ArtifactRuleSet.from_options({"bogus": 1})


def test_invalid_regex_rejected():
    with pytest.raises(RuleConfigError):
        ArtifactRuleSet.from_options({"msoAnchorPattern": "(unclosed"})


def test_unknown_preset_rejected():
    with pytest.raises(RuleConfigError):
        ArtifactRuleSet.preset("nope")


def test_to_options_round_trips(rules):
    options = rules.to_options()
    assert options["word_id_pattern"] == rules.word_id_pattern.pattern
    assert ArtifactRuleSet.from_options(options) == rules
    assert isinstance(rules.word_id_pattern, re.Pattern)
