from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any, Mapping

from config.rules import DEFAULT_PRESET, PRESETS
from core.errors import RuleConfigError

# camelCase names accepted from JSON option files / injected host config.
_OPTION_ALIASES = {
    "vendorClassSubstrings": "vendor_class_substrings",
    "unconditionalRemoveAttrs": "unconditional_remove_attrs",
    "conditionalRemoveAttrs": "conditional_remove_attrs",
    "hrPresentationalAttrs": "hr_presentational_attrs",
    "wordIdPattern": "word_id_pattern",
    "vendorIdMarkers": "vendor_id_markers",
    "msoAnchorPattern": "mso_anchor_pattern",
    "eventHandlerPrefix": "event_handler_prefix",
    "vendorNamespacePrefixes": "vendor_namespace_prefixes",
    "vendorNamespaceAttrs": "vendor_namespace_attrs",
    "blockTags": "block_tags",
    "pruneEmptyBlocks": "prune_empty_blocks",
}

_PATTERN_FIELDS = {"word_id_pattern", "mso_anchor_pattern"}
_LOWERCASE_FIELDS = {
    "vendor_class_substrings",
    "unconditional_remove_attrs",
    "conditional_remove_attrs",
    "hr_presentational_attrs",
    "vendor_namespace_prefixes",
    "vendor_namespace_attrs",
    "block_tags",
}


@dataclass(frozen=True)
class ArtifactRuleSet:
    """Immutable rule table consulted by the element cleaner and the block pruner.

    All name/substring collections are stored lowercased so matching is
    case-insensitive. Vendor id markers are the exception: they are matched
    case-sensitively so that ordinary ids such as "password" survive.
    """

    vendor_class_substrings: frozenset[str]
    unconditional_remove_attrs: frozenset[str]
    conditional_remove_attrs: frozenset[str]
    hr_presentational_attrs: frozenset[str]
    word_id_pattern: re.Pattern
    vendor_id_markers: tuple[str, ...]
    mso_anchor_pattern: re.Pattern
    event_handler_prefix: str | None
    vendor_namespace_prefixes: tuple[str, ...]
    vendor_namespace_attrs: frozenset[str]
    block_tags: frozenset[str]
    prune_empty_blocks: bool

    @classmethod
    def from_options(cls, options: Mapping[str, Any], base: Mapping[str, Any] | None = None) -> "ArtifactRuleSet":
        """Build a rule set from an options mapping; missing keys come from `base` (default: standard preset)."""
        merged: dict[str, Any] = dict(PRESETS[DEFAULT_PRESET] if base is None else base)
        known = {f.name for f in fields(cls)}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise RuleConfigError(f"Unknown rule option {key!r}")
            merged[name] = value

        kwargs: dict[str, Any] = {}
        for name in known:
            value = merged.get(name)
            if name in _PATTERN_FIELDS:
                kwargs[name] = _compile(name, value)
            elif name in _LOWERCASE_FIELDS:
                values = [str(v).lower() for v in (value or [])]
                if name == "vendor_namespace_prefixes":
                    kwargs[name] = tuple(values)
                else:
                    kwargs[name] = frozenset(values)
            elif name == "vendor_id_markers":
                kwargs[name] = tuple(str(v) for v in (value or []))
            elif name == "event_handler_prefix":
                kwargs[name] = str(value).lower() if value else None
            else:
                kwargs[name] = bool(value)
        return cls(**kwargs)

    @classmethod
    def preset(cls, name: str = DEFAULT_PRESET) -> "ArtifactRuleSet":
        if name not in PRESETS:
            raise RuleConfigError(
                f"Unknown rule preset {name!r}. Options: {', '.join(PRESETS)}"
            )
        return cls.from_options(PRESETS[name])

    # --- matchers ---

    def is_vendor_class(self, token: str) -> bool:
        lowered = token.lower()
        return any(s in lowered for s in self.vendor_class_substrings)

    def is_event_handler(self, name: str) -> bool:
        return bool(self.event_handler_prefix) and name.startswith(self.event_handler_prefix)

    def is_vendor_namespace(self, name: str) -> bool:
        if name in self.vendor_namespace_attrs:
            return True
        if "xmlns" in self.vendor_namespace_attrs and name.startswith("xmlns:"):
            return True
        return name.startswith(self.vendor_namespace_prefixes) if self.vendor_namespace_prefixes else False

    def is_vendor_value(self, name: str, value: Any) -> bool:
        """Return True if a conditionally-removed attribute carries a vendor-generated value."""
        if name not in self.conditional_remove_attrs:
            return False
        if not value or not isinstance(value, str):
            return False
        if name == "id":
            return bool(self.word_id_pattern.match(value)) or any(
                marker in value for marker in self.vendor_id_markers
            )
        if name == "name":
            return bool(self.mso_anchor_pattern.match(value))
        if name == "lang":
            return len(value) == 2
        return False

    def should_remove_attr(self, name: str, value: Any) -> bool:
        """Attribute-level removal decision. `name` must already be lowercased."""
        if name in self.unconditional_remove_attrs:
            return True
        if self.is_event_handler(name):
            return True
        if self.is_vendor_namespace(name):
            return True
        return self.is_vendor_value(name, value)

    def to_options(self) -> dict[str, Any]:
        """Return a JSON-serialisable view of this rule set."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, re.Pattern):
                out[f.name] = value.pattern
            elif isinstance(value, frozenset):
                out[f.name] = sorted(value)
            elif isinstance(value, tuple):
                out[f.name] = list(value)
            else:
                out[f.name] = value
        return out


def _compile(name: str, pattern: Any) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern or r"(?!)")
    except re.error as e:
        raise RuleConfigError(f"Invalid regex for {name}: {e}") from e
