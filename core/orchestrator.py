import uuid

from config.config import get_history_enabled, get_html_parser, get_rule_set, get_rule_source
from core.errors import SelectionExtractionFailure
from core.rule_set import ArtifactRuleSet
from core.sanitizer import CleanResult, HtmlSanitizer
from memory.log_handler import LogHandler
from utils.observability import elapsed_ms, get_logger, log_event


class CleanOrchestrator:
    """
    Scope resolution: selection -> sanitize -> replace, or document -> sanitize -> replace.

    A non-collapsed selection is cleaned on its own. If the host cannot
    materialise or replace the selection, the whole document is cleaned
    instead. Content is only written back when cleaning changed it, and
    every write happens inside one host batch so it is a single undo step.
    Each run is recorded in the clean history unless disabled.
    """

    def __init__(
        self,
        rules: ArtifactRuleSet | None = None,
        parser: str | None = None,
        history: bool | None = None,
    ):
        self.rule_preset = "custom" if rules is not None else get_rule_source()
        self.rules = rules if rules is not None else get_rule_set()
        self.sanitizer = HtmlSanitizer(self.rules, parser or get_html_parser())
        self.history_enabled = get_history_enabled() if history is None else history
        self.logger = LogHandler() if self.history_enabled else None

    def clean(self, editor) -> dict:
        """
        Clean the editor's selection (or whole document) in place and return a result dict.

        Never raises for parse/serialization problems or selection failures;
        the worst case is an unchanged editor.
        """
        ops = get_logger("artifact_cleaner.ops")
        trace_id = str(uuid.uuid4())
        selection = editor.get_selection()
        use_selection = selection is not None and not selection.is_collapsed

        log_event(ops, "clean_start", trace_id=trace_id, selection=use_selection)

        with elapsed_ms() as timing:
            result = None
            scope = "document"
            fallback = False
            if use_selection:
                try:
                    result = self._clean_selection(editor)
                    scope = "selection"
                except Exception as e:
                    # Includes SelectionExtractionFailure; anything the host
                    # raised while extracting or replacing the selection.
                    fallback = True
                    log_event(
                        ops,
                        "selection_fallback",
                        trace_id=trace_id,
                        error_type=type(e).__name__,
                        error=str(e).split("\n")[0],
                    )
            if result is None:
                result = self._clean_document(editor)

        summary = {
            "trace_id":    trace_id,
            "scope":       scope,
            "fallback":    fallback,
            "changed":     result.changed,
            "status":      _status(result),
            "rule_preset": self.rule_preset,
            "input_len":   len(result.original or ""),
            "output_len":  len(result.html or ""),
            "stats":       result.stats.as_dict(),
            "error_type":  result.error,
            "latency_ms":  timing["latency_ms"],
            "html":        result.html,
            "log_id":      None,
        }

        if self.logger is not None:
            try:
                summary["log_id"] = self.logger.log_run(summary)
            except Exception:
                ops.exception(
                    "history_write_error",
                    extra={"extra_fields": {"event": "history_write_error", "trace_id": trace_id}},
                )

        log_event(
            ops,
            "clean_end",
            trace_id=trace_id,
            scope=scope,
            fallback=fallback,
            status=summary["status"],
            changed=result.changed,
            latency_ms=summary["latency_ms"],
            log_id=summary["log_id"],
        )
        return summary

    def _clean_selection(self, editor) -> CleanResult:
        selected_html = editor.get_selected_html()
        if not isinstance(selected_html, str):
            raise SelectionExtractionFailure("Host returned no HTML for the selection")
        result = self.sanitizer.sanitize(selected_html)
        if result.changed:
            with editor.batch():
                editor.set_selected_html(result.html)
        return result

    def _clean_document(self, editor) -> CleanResult:
        current = editor.get_data()
        result = self.sanitizer.sanitize(current)
        if result.changed:
            with editor.batch():
                editor.set_data(result.html)
        return result


def _status(result: CleanResult) -> str:
    if result.error:
        return "error_contained"
    return "changed" if result.changed else "unchanged"


def clean(editor, rules: ArtifactRuleSet | None = None) -> dict:
    """Convenience wrapper: clean an editor with the configured (or given) rules."""
    return CleanOrchestrator(rules=rules).clean(editor)


if __name__ == "__main__":
    from integrations.editor_host import InMemoryEditor

    editor = InMemoryEditor('<p class="MsoNormal">&nbsp;</p><p>Keep me</p>')
    result = CleanOrchestrator(history=False).clean(editor)
    print("Document:", editor.get_data())
    print("Scope:   ", result["scope"], "| changed:", result["changed"])
