"""Artifact sanitizer pipeline.

entity normalize -> parse -> element clean -> prune empty blocks -> serialize

Parse and serialization failures are contained: the original input comes
back unchanged so callers see "nothing to clean" instead of a partial result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from core.block_pruner import EmptyBlockPruner
from core.element_cleaner import ElementCleaner
from core.entity_normalizer import EntityNormalizer
from core.html_tree import DEFAULT_PARSER, parse
from core.rule_set import ArtifactRuleSet
from utils.observability import get_logger, log_event


@dataclass
class CleanStats:
    elements_visited: int = 0
    styles_removed: int = 0
    classes_removed: int = 0
    attributes_removed: int = 0
    entities_replaced: int = 0
    blocks_pruned: int = 0

    @property
    def total_changes(self) -> int:
        return (
            self.styles_removed
            + self.classes_removed
            + self.attributes_removed
            + self.entities_replaced
            + self.blocks_pruned
        )

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CleanResult:
    html: str
    original: str
    stats: CleanStats = field(default_factory=CleanStats)
    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.html != self.original


class HtmlSanitizer:
    """Pure HTML-string to HTML-string artifact cleaner."""

    def __init__(self, rules: ArtifactRuleSet | None = None, parser: str | None = None):
        self.rules = rules or ArtifactRuleSet.preset()
        self.parser = parser or DEFAULT_PARSER
        self.normalizer = EntityNormalizer()
        self.cleaner = ElementCleaner(self.rules)
        self.pruner = EmptyBlockPruner(self.rules)

    def sanitize(self, html) -> CleanResult:
        if not html or not isinstance(html, str):
            return CleanResult(html=html, original=html)

        ops = get_logger("artifact_cleaner.sanitizer")
        stats = CleanStats()
        try:
            normalized, stats.entities_replaced = self.normalizer.normalize_with_count(html)
            fragment = parse(normalized, self.parser)

            counters: dict[str, int] = {}
            for element in fragment.elements():
                stats.elements_visited += 1
                self.cleaner.clean(element, counters)
            stats.styles_removed = counters.get("styles_removed", 0)
            stats.classes_removed = counters.get("classes_removed", 0)
            stats.attributes_removed = counters.get("attributes_removed", 0)

            stats.blocks_pruned = self.pruner.prune(fragment)

            # Nothing fired: hand back the input verbatim so parser
            # normalization alone never registers as a change.
            if stats.total_changes == 0:
                return CleanResult(html=html, original=html, stats=stats)

            cleaned = fragment.serialize()
        except Exception as e:
            ops.exception(
                "sanitize_error",
                extra={"extra_fields": {"event": "sanitize_error", "error_type": type(e).__name__}},
            )
            return CleanResult(html=html, original=html, stats=CleanStats(), error=type(e).__name__)

        log_event(ops, "sanitize_done", input_len=len(html), output_len=len(cleaned), **stats.as_dict())
        return CleanResult(html=cleaned, original=html, stats=stats)


def sanitize_html(html, rules: ArtifactRuleSet | None = None) -> str:
    """Return `html` with authoring artifacts removed."""
    return HtmlSanitizer(rules).sanitize(html).html


if __name__ == "__main__":
    raw = '<p class="MsoNormal" style="margin:0cm">&nbsp;</p><p lang="en">Keep me</p>'
    result = HtmlSanitizer().sanitize(raw)
    print("Raw:    ", raw)
    print("Cleaned:", result.html)
    print("Stats:  ", result.stats.as_dict())
