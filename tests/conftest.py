import os

import pytest


@pytest.fixture(scope="session", autouse=True)
def _isolate_history_db(tmp_path_factory: pytest.TempPathFactory):
    """Isolate the clean-history SQLite DB per test session."""
    db_path = tmp_path_factory.mktemp("artifact_cleaner") / "clean_log_test.db"
    os.environ["CLEAN_LOG_DB_PATH"] = str(db_path)
    os.environ["ENV_NAME"] = "test"
    yield


@pytest.fixture(autouse=True)
def _default_rules(monkeypatch: pytest.MonkeyPatch):
    """Each test starts from the standard preset and the default parser."""
    for var in ("CLEANER_RULE_PRESET", "CLEANER_RULES_FILE", "CLEANER_HTML_PARSER", "CLEAN_HISTORY_ENABLED"):
        monkeypatch.delenv(var, raising=False)
