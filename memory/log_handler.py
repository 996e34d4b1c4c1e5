import os
import uuid

from memory.db import get_env_name, get_totals, init_db, insert_run
from utils.helpers import utc_now_iso

_STAT_KEYS = (
    "elements_visited",
    "styles_removed",
    "classes_removed",
    "attributes_removed",
    "entities_replaced",
    "blocks_pruned",
)


class LogHandler:
    """Adapter between CleanOrchestrator's result dict and the SQLite database layer."""

    def __init__(self):
        init_db()   # idempotent; creates the table if it does not exist

    def log_run(self, clean_result: dict) -> int:
        """
        Persist one clean run to the database.

        Flattens the orchestrator's result dict (including its nested stats)
        into the clean_runs schema, adds a UTC timestamp and env name, and
        returns the inserted row id.
        """
        stats = clean_result.get("stats") or {}
        record = {
            "timestamp":   utc_now_iso(),
            "env_name":    os.getenv("ENV_NAME", get_env_name()),
            "trace_id":    clean_result.get("trace_id") or str(uuid.uuid4()),
            "scope":       clean_result.get("scope", "document"),
            "fallback":    int(bool(clean_result.get("fallback", False))),
            "status":      clean_result.get("status", "unknown"),
            "changed":     int(bool(clean_result.get("changed", False))),
            "rule_preset": clean_result.get("rule_preset"),
            "input_len":   clean_result.get("input_len", 0),
            "output_len":  clean_result.get("output_len", 0),
            "latency_ms":  clean_result.get("latency_ms"),
            "error_type":  clean_result.get("error_type"),
        }
        for key in _STAT_KEYS:
            record[key] = int(stats.get(key, 0))
        return insert_run(record)

    def totals(self) -> dict:
        """Return aggregate counters across all logged runs."""
        return get_totals()


if __name__ == "__main__":
    handler = LogHandler()
    fake_result = {
        "scope": "document", "status": "changed", "changed": True,
        "stats": {"styles_removed": 2, "blocks_pruned": 1},
        "input_len": 80, "output_len": 20,
    }
    row_id = handler.log_run(fake_result)
    print(f"Logged run with id={row_id}")
    print(f"Totals: {handler.totals()}")
