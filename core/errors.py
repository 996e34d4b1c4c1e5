"""Error taxonomy for the artifact cleaner.

Parse and serialization failures are contained by the sanitizer (the original
input is returned). Selection extraction failures are contained by the
orchestrator (it falls back to whole-document cleaning). Rule configuration
errors are raised at load time and are never contained.
"""


class CleanerError(Exception):
    """Base class for all cleaner errors."""

    code = "cleaner_error"


class ParseFailure(CleanerError):
    code = "parse_failure"


class SerializationFailure(CleanerError):
    code = "serialization_failure"


class SelectionExtractionFailure(CleanerError):
    code = "selection_extraction_failure"


class RuleConfigError(CleanerError, ValueError):
    code = "rule_config_error"
