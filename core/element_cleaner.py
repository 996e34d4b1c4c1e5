from __future__ import annotations

from bs4 import Tag

from core.rule_set import ArtifactRuleSet


class ElementCleaner:
    """Strip artifact attributes and classes from a single element.

    Never removes the element itself. Every decision depends only on the
    element's own attributes, so traversal order does not matter and a
    second pass over the same tree is a no-op.
    """

    def __init__(self, rules: ArtifactRuleSet):
        self.rules = rules

    def clean(self, element: Tag, stats: dict[str, int] | None = None) -> bool:
        """Clean one element in place. Returns True if anything was removed."""
        counts = {"styles_removed": 0, "classes_removed": 0, "attributes_removed": 0}

        # 1. Inline styles go unconditionally.
        if element.has_attr("style"):
            del element["style"]
            counts["styles_removed"] += 1

        # 2. Vendor class tokens.
        if element.has_attr("class"):
            tokens = self._class_tokens(element["class"])
            kept = [t for t in tokens if not self.rules.is_vendor_class(t)]
            if len(kept) != len(tokens):
                counts["classes_removed"] += len(tokens) - len(kept)
                if kept:
                    element["class"] = kept
                else:
                    del element["class"]

        # 3. Vendor / metadata / event-handler attributes.
        for name in list(element.attrs):
            if name in ("style", "class"):
                continue
            if self.rules.should_remove_attr(name.lower(), element.attrs[name]):
                del element[name]
                counts["attributes_removed"] += 1

        # 4. Legacy presentational attributes on <hr>.
        if element.name == "hr":
            for name in list(element.attrs):
                if name.lower() in self.rules.hr_presentational_attrs:
                    del element[name]
                    counts["attributes_removed"] += 1

        if stats is not None:
            for key, value in counts.items():
                stats[key] = stats.get(key, 0) + value
        return any(counts.values())

    @staticmethod
    def _class_tokens(value) -> list[str]:
        if isinstance(value, (list, tuple)):
            raw = " ".join(value)
        else:
            raw = str(value)
        return raw.split()
