import re

# &nbsp;, &NonBreakingSpace;, &#160;, &#xA0; (any case, optional leading zeros) and U+00A0 itself.
# &nbsp, &#160 and &#xA0 without the semicolon are decoded by browsers too, unless more
# name or digit characters follow.
_NBSP_RE = re.compile(
    r"&(?:nbsp(?:;|(?![A-Za-z0-9=]))|NonBreakingSpace;)"
    r"|&#0*160(?:;|(?![0-9]))"
    r"|&#[xX]0*[aA]0(?:;|(?![0-9a-fA-F]))"
    r"|\u00a0"
)


class EntityNormalizer:
    """Replace every non-breaking-space representation with an ordinary space."""

    def normalize(self, html):
        """Return `html` with non-breaking spaces replaced. Non-string or empty input is returned as-is."""
        text, _ = self.normalize_with_count(html)
        return text

    def normalize_with_count(self, html):
        """Like normalize(), but also return how many replacements were made."""
        if not html or not isinstance(html, str):
            return html, 0
        return _NBSP_RE.subn(" ", html)


if __name__ == "__main__":
    normalizer = EntityNormalizer()
    raw = "a&nbsp;b&#160;c&#xA0;d\u00a0e"
    print("Raw:       ", repr(raw))
    print("Normalized:", repr(normalizer.normalize(raw)))
