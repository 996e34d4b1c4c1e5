from __future__ import annotations

from bs4 import Tag

from core.html_tree import HtmlDocumentFragment
from core.rule_set import ArtifactRuleSet


class EmptyBlockPruner:
    """Remove paragraph-level blocks left empty after cleaning.

    A block is empty when its trimmed text is empty and it has no element
    children other than <br>. Must run after entity normalization so that
    a paragraph holding only a non-breaking space qualifies.
    """

    def __init__(self, rules: ArtifactRuleSet):
        self.rules = rules

    def is_empty(self, element: Tag) -> bool:
        if element.get_text().strip():
            return False
        return all(child.name == "br" for child in element.find_all(True, recursive=False))

    def prune(self, fragment: HtmlDocumentFragment) -> int:
        """Remove empty blocks from the fragment in place. Returns the number removed."""
        if not self.rules.prune_empty_blocks or not self.rules.block_tags:
            return 0
        removed = 0
        # Reverse document order: nested blocks are visited before their
        # ancestors, so an ancestor emptied by the removal is pruned too.
        for element in reversed(fragment.find_all(list(self.rules.block_tags))):
            if self.is_empty(element):
                element.decompose()
                removed += 1
        return removed
