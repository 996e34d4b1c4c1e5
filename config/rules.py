"""Compiled-in rule presets for artifact cleanup.

Each preset is an options mapping accepted by ArtifactRuleSet.from_options:
  - vendor_class_substrings: class tokens containing any of these (case-insensitive) are dropped
  - unconditional_remove_attrs: attributes always removed
  - conditional_remove_attrs: attributes removed only when the value looks vendor-generated
  - hr_presentational_attrs: legacy attributes stripped from <hr>
  - word_id_pattern / mso_anchor_pattern: regexes for vendor id / name values

"standard" is the reference table. The legacy presets reproduce the narrower
behaviour of earlier plugin revisions and are kept for compatibility only.
"""

_ORIGINAL_WORD_CLASSES = [
    "OutlineElement",
    "Ltr",
    "SCXW",
    "BCX",
    "ListContainerWrapper",
    "NormalTextRun",
    "EOP",
    "Paragraph",
    "MsoNormal",
    "MsoListParagraph",
    "MsoBodyText",
]

WORD_ID_PATTERN = r"^(OLE_LINK|_Toc|_Ref)\d*$"
MSO_ANCHOR_PATTERN = r"^(OLE_LINK|_Toc|_Ref|_Hlk|_GoBack|_msoanchor_|_msocom_|_ftn|_ftnref|_edn|_ednref)\d*$"

PRESETS = {
    "standard": {
        "vendor_class_substrings": _ORIGINAL_WORD_CLASSES + [
            "TextRun",
            "SpellingError",
            "MsoTitle",
            "MsoSubtitle",
            "MsoQuote",
            "MsoIntenseQuote",
            "MsoNoSpacing",
            "MsoListBullet",
            "MsoListNumber",
            "MsoHeader",
            "MsoFooter",
            "MsoTableGrid",
        ],
        "unconditional_remove_attrs": [
            "paraid", "paraeid", "lang", "xml:lang",
            "data-contrast", "data-ccp-props", "data-ccp-parastyle",
            "data-ccp-parastyle-defn", "data-ccp-charstyle",
            "data-listid", "data-list-defn-props",
            "data-aria-level", "data-aria-posinset",
            "data-font", "data-leveltext",
            "data-ogsc", "data-ogsb", "data-ogac", "data-ogab",
        ],
        "conditional_remove_attrs": ["id", "name"],
        "hr_presentational_attrs": ["align", "size", "width", "color", "noshade"],
        "word_id_pattern": WORD_ID_PATTERN,
        "vendor_id_markers": ["Word", "Office"],
        "mso_anchor_pattern": MSO_ANCHOR_PATTERN,
        "event_handler_prefix": "on",
        "vendor_namespace_prefixes": ["o:", "w:", "v:", "x:", "m:", "st1:"],
        "vendor_namespace_attrs": ["xmlns"],
        "block_tags": ["p"],
        "prune_empty_blocks": True,
    },
    "legacy_clean_style": {
        "vendor_class_substrings": _ORIGINAL_WORD_CLASSES,
        "unconditional_remove_attrs": ["paraid", "paraeid"],
        "conditional_remove_attrs": ["id", "lang"],
        "hr_presentational_attrs": [],
        "word_id_pattern": WORD_ID_PATTERN,
        "vendor_id_markers": ["Word", "Office"],
        "event_handler_prefix": None,
        "vendor_namespace_prefixes": [],
        "vendor_namespace_attrs": [],
        "block_tags": ["p"],
        "prune_empty_blocks": True,
    },
    "legacy_text_styles": {
        "vendor_class_substrings": _ORIGINAL_WORD_CLASSES,
        "unconditional_remove_attrs": ["paraid", "paraeid"],
        "conditional_remove_attrs": ["id"],
        "hr_presentational_attrs": [],
        "word_id_pattern": WORD_ID_PATTERN,
        "vendor_id_markers": ["Word", "Office"],
        "event_handler_prefix": None,
        "vendor_namespace_prefixes": [],
        "vendor_namespace_attrs": [],
        "block_tags": ["p"],
        "prune_empty_blocks": False,
    },
}

DEFAULT_PRESET = "standard"

# Presets that still load but log a deprecation event.
DEPRECATED_PRESETS = {"legacy_clean_style", "legacy_text_styles"}
