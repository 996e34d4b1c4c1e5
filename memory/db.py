import os
import threading
from pathlib import Path

from sqlite_utils import Database

# --- Database location & environment ---

_DEFAULT_DB_PATH = Path(__file__).parent / "clean_log.db"


def get_env_name() -> str:
    return os.getenv("ENV_NAME", "dev")


def get_db_path() -> Path:
    raw = os.getenv("CLEAN_LOG_DB_PATH")
    if raw:
        return Path(raw)
    return _DEFAULT_DB_PATH

_INIT_LOCK = threading.Lock()
_INIT_DONE: set[str] = set()
_DB_CACHE_LOCK = threading.Lock()
_DB_CACHE: dict[str, Database] = {}


# --- Schema for the clean_runs table ---
_SCHEMA = {
    "id":                 int,
    "timestamp":          str,
    "env_name":           str,
    "trace_id":           str,
    "scope":              str,   # "selection" or "document"
    "fallback":           int,   # 1 when a selection clean fell back to the whole document
    "status":             str,
    "changed":            int,   # 0 or 1 (SQLite has no boolean)
    "rule_preset":        str,
    "input_len":          int,
    "output_len":         int,
    "elements_visited":   int,
    "styles_removed":     int,
    "classes_removed":    int,
    "attributes_removed": int,
    "entities_replaced":  int,
    "blocks_pruned":      int,
    "latency_ms":         float,
    "error_type":         str,
}


def get_db() -> Database:
    """Open (or create) the SQLite database at the configured path."""
    path = str(get_db_path())
    with _DB_CACHE_LOCK:
        db = _DB_CACHE.get(path)
        if db is None:
            db = Database(path)
            # FastAPI/TestClient may touch the DB from worker threads.
            db.conn.execute("PRAGMA busy_timeout = 5000")
            db.conn.execute("PRAGMA journal_mode = WAL")
            _DB_CACHE[path] = db
        return db


def init_db() -> None:
    """Create the clean_runs and meta tables if they do not exist.

    Safe to call multiple times; tracked per database path.
    """
    path = str(get_db_path())
    if path in _INIT_DONE:
        return

    with _INIT_LOCK:
        if path in _INIT_DONE:
            return

        db = get_db()
        tables = db.table_names()

        if "clean_runs" not in tables:
            db["clean_runs"].create(_SCHEMA, pk="id")

        if "meta" not in tables:
            db["meta"].create({"key": str, "value": str}, pk="key")
        row = db.execute(
            "SELECT value FROM meta WHERE key = ? LIMIT 1",
            ["schema_version"],
        ).fetchone()
        if row is None:
            db.execute(
                "INSERT INTO meta (key, value) VALUES (?, ?)",
                ["schema_version", "1"],
            )

        _INIT_DONE.add(path)


def insert_run(run_data: dict) -> int:
    """Insert one clean run record. Returns the new row id."""
    db = get_db()
    return db["clean_runs"].insert(run_data, alter=True).last_pk


def get_recent_runs(limit: int = 10) -> list[dict]:
    """Return the most recent `limit` runs as a list of dicts, newest first."""
    init_db()
    return list(get_db()["clean_runs"].rows_where(order_by="-id", limit=limit))


def get_totals() -> dict:
    """Aggregate counters across all logged runs."""
    init_db()
    row = get_db().execute(
        "SELECT COUNT(*), COALESCE(SUM(changed), 0), "
        "COALESCE(SUM(styles_removed + classes_removed + attributes_removed), 0), "
        "COALESCE(SUM(blocks_pruned), 0) FROM clean_runs"
    ).fetchone()
    return {
        "runs": int(row[0]),
        "changed_runs": int(row[1]),
        "artifacts_removed": int(row[2]),
        "blocks_pruned": int(row[3]),
    }


if __name__ == "__main__":
    init_db()
    print("DB initialised at:", get_db_path())
    print("Tables:", get_db().table_names())
    print("Totals:", get_totals())
