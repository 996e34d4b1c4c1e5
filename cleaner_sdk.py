from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class ArtifactCleanerClient:
    """Minimal Python client for calling an Artifact Cleaner server via HTTP."""

    base_url: str = "http://localhost:8000"
    timeout_s: float = 30.0

    def sanitize(self, html: str) -> dict[str, Any]:
        """Clean an HTML string. Returns {"html", "changed", "stats", "error"}."""
        r = httpx.post(f"{self.base_url}/api/sanitize", json={"html": html}, timeout=self.timeout_s)
        r.raise_for_status()
        return r.json()

    def clean(
        self,
        html: str,
        *,
        selection_start: int | None = None,
        selection_end: int | None = None,
    ) -> dict[str, Any]:
        """Clean a document, or only the given selection of it, as the editor button would."""
        body: dict[str, Any] = {"html": html}
        if selection_start is not None:
            body["selection_start"] = selection_start
        if selection_end is not None:
            body["selection_end"] = selection_end

        r = httpx.post(f"{self.base_url}/api/clean", json=body, timeout=self.timeout_s)
        r.raise_for_status()
        return r.json()
