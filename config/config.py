import json
import os
from pathlib import Path

from dotenv import load_dotenv

from config.rules import DEFAULT_PRESET, DEPRECATED_PRESETS, PRESETS
from core.errors import RuleConfigError
from core.html_tree import DEFAULT_PARSER, SUPPORTED_PARSERS
from core.rule_set import ArtifactRuleSet
from utils.observability import get_logger, log_event

_ROOT = Path(__file__).parent.parent
load_dotenv(_ROOT / ".env")


def get_rule_preset() -> str:
    """Return CLEANER_RULE_PRESET from .env. Defaults to 'standard'."""
    name = os.getenv("CLEANER_RULE_PRESET", DEFAULT_PRESET).strip().lower() or DEFAULT_PRESET
    if name not in PRESETS:
        raise ValueError(
            f"Unknown CLEANER_RULE_PRESET={name!r}. "
            f"Options: {', '.join(PRESETS)}"
        )
    return name


def get_rules_file() -> Path | None:
    """Optional JSON file with rule options (CLEANER_RULES_FILE)."""
    raw = os.getenv("CLEANER_RULES_FILE", "").strip()
    return Path(raw) if raw else None


def get_rule_set() -> ArtifactRuleSet:
    """Load the active rule set with priority: CLEANER_RULES_FILE > CLEANER_RULE_PRESET.

    A rules file only needs the keys it overrides; the rest come from the
    standard preset.
    """
    rules_file = get_rules_file()
    if rules_file is not None:
        if not rules_file.exists():
            raise FileNotFoundError(f"CLEANER_RULES_FILE not found: {rules_file}")
        with open(rules_file, "r", encoding="utf-8") as f:
            try:
                options = json.load(f)
            except json.JSONDecodeError as e:
                raise RuleConfigError(f"CLEANER_RULES_FILE is not valid JSON: {e}") from e
        if not isinstance(options, dict):
            raise RuleConfigError("CLEANER_RULES_FILE must contain a JSON object")
        return ArtifactRuleSet.from_options(options)

    preset = get_rule_preset()
    if preset in DEPRECATED_PRESETS:
        log_event(
            get_logger("artifact_cleaner.config"),
            "deprecated_rule_preset",
            preset=preset,
            replacement=DEFAULT_PRESET,
        )
    return ArtifactRuleSet.preset(preset)


def get_rule_source() -> str:
    """Human-readable name of where the active rules come from."""
    rules_file = get_rules_file()
    if rules_file is not None:
        return f"file:{rules_file}"
    return get_rule_preset()


def get_html_parser() -> str:
    """Return CLEANER_HTML_PARSER. Defaults to the browser-grade 'html5lib'."""
    raw = os.getenv("CLEANER_HTML_PARSER", DEFAULT_PARSER).strip() or DEFAULT_PARSER
    if raw not in SUPPORTED_PARSERS:
        raise ValueError(
            f"CLEANER_HTML_PARSER must be one of {', '.join(SUPPORTED_PARSERS)}, got: {raw!r}"
        )
    return raw


def get_history_enabled() -> bool:
    """Whether each orchestrated clean is written to the history DB. Default: True."""
    return os.getenv("CLEAN_HISTORY_ENABLED", "true").lower() in ("true", "1", "yes")


def get_api_base() -> str:
    """Base URL the CLI and SDK use to reach the API server."""
    return os.getenv("CLEANER_API_BASE", "http://localhost:8000").rstrip("/")


if __name__ == "__main__":
    print(f"Rules:   {get_rule_source()}")
    print(f"Parser:  {get_html_parser()}")
    print(f"History: {get_history_enabled()}")
    for key, value in get_rule_set().to_options().items():
        print(f"  {key}: {value}")
