from datetime import datetime, timezone


def truncate_text(text: str, max_chars: int = 80, suffix: str = "...") -> str:
    """Truncate text to max_chars and append suffix if truncated."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars - len(suffix)] + suffix


def build_clean_summary(clean_result: dict) -> str:
    """Build a formatted multi-line summary string from a CleanOrchestrator result dict."""
    scope = clean_result.get("scope", "unknown")
    if clean_result.get("fallback"):
        scope = f"{scope} (selection fallback)"
    stats = clean_result.get("stats", {})
    lines = [
        f"Scope:              {scope}",
        f"Status:             {clean_result.get('status', 'unknown')}",
        f"Changed:            {'Yes' if clean_result.get('changed') else 'No'}",
        f"Styles removed:     {stats.get('styles_removed', 0)}",
        f"Classes removed:    {stats.get('classes_removed', 0)}",
        f"Attributes removed: {stats.get('attributes_removed', 0)}",
        f"NBSP replaced:      {stats.get('entities_replaced', 0)}",
        f"Blocks pruned:      {stats.get('blocks_pruned', 0)}",
        f"Input / output:     {clean_result.get('input_len', 0)} -> {clean_result.get('output_len', 0)} chars",
    ]
    if clean_result.get("latency_ms") is not None:
        lines.append(f"Latency:            {clean_result['latency_ms']:.2f} ms")
    if clean_result.get("error_type"):
        lines.append(f"Contained error:    {clean_result['error_type']}")
    if "log_id" in clean_result and clean_result["log_id"] is not None:
        lines.append(f"Log ID:             {clean_result['log_id']}")
    return "\n".join(lines)


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


if __name__ == "__main__":
    sample = {
        "scope": "document", "status": "changed", "changed": True,
        "stats": {"styles_removed": 3, "classes_removed": 2, "attributes_removed": 4,
                  "entities_replaced": 5, "blocks_pruned": 1},
        "input_len": 420, "output_len": 120, "latency_ms": 1.7, "log_id": 7,
    }
    print(build_clean_summary(sample))
    print("\nNow:", utc_now_iso())
