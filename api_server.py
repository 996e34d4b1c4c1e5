from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, model_validator
import uvicorn

from config.config import get_html_parser, get_rule_set, get_rule_source
from config.rules import DEPRECATED_PRESETS, PRESETS
from core.orchestrator import CleanOrchestrator
from core.sanitizer import HtmlSanitizer
from integrations.editor_host import InMemoryEditor
from memory.db import get_recent_runs, get_totals
from utils.helpers import build_clean_summary, truncate_text
from utils.observability import get_logger, log_event


@asynccontextmanager
async def lifespan(app: FastAPI):
    CleanOrchestrator()   # validates config and triggers init_db() via LogHandler.__init__
    ops = get_logger("artifact_cleaner.api")
    log_event(ops, "api_start", rules=get_rule_source(), parser=get_html_parser())
    yield


app = FastAPI(title="Artifact Cleaner API", version="0.1.0", lifespan=lifespan)


# --- Pydantic schemas ---

class CleanStatsModel(BaseModel):
    elements_visited:   int = 0
    styles_removed:     int = 0
    classes_removed:    int = 0
    attributes_removed: int = 0
    entities_replaced:  int = 0
    blocks_pruned:      int = 0


class SanitizeRequest(BaseModel):
    html: str = Field(..., description="HTML fragment to clean")


class SanitizeResponse(BaseModel):
    html:    str
    changed: bool
    stats:   CleanStatsModel
    error:   str | None = None


class CleanRequest(BaseModel):
    html:            str        = Field(...,  description="Full editor document HTML")
    selection_start: int | None = Field(None, ge=0, description="Selection start offset; null = no selection")
    selection_end:   int | None = Field(None, ge=0, description="Selection end offset; null = no selection")

    @model_validator(mode="after")
    def _selection_pair(self):
        if (self.selection_start is None) != (self.selection_end is None):
            raise ValueError("selection_start and selection_end must be given together")
        return self


class CleanResponse(BaseModel):
    trace_id:       str
    scope:          str
    fallback:       bool
    changed:        bool
    status:         str
    html:           str
    selection_html: str | None = None
    stats:          CleanStatsModel
    error_type:     str | None = None
    latency_ms:     float
    log_id:         int | None = None
    summary:        str


# --- Endpoints ---

@app.post("/api/sanitize", response_model=SanitizeResponse)
def sanitize(body: SanitizeRequest):
    """Clean an HTML string (no editor state, no history write)."""
    ops = get_logger("artifact_cleaner.api")
    result = HtmlSanitizer(get_rule_set(), get_html_parser()).sanitize(body.html)
    log_event(
        ops,
        "api_sanitize_ok",
        changed=result.changed,
        input_preview=truncate_text(body.html, max_chars=80),
    )
    return SanitizeResponse(
        html=result.html,
        changed=result.changed,
        stats=CleanStatsModel(**result.stats.as_dict()),
        error=result.error,
    )


@app.post("/api/clean", response_model=CleanResponse)
def clean(body: CleanRequest):
    """Clean a document (or the selected range of it) as the editor button would."""
    ops = get_logger("artifact_cleaner.api")
    selection = None
    if body.selection_start is not None:
        selection = (body.selection_start, body.selection_end)
    editor = InMemoryEditor(body.html, selection=selection)

    try:
        result = CleanOrchestrator().clean(editor)
    except Exception as e:
        msg = str(e).split("\n")[0] if str(e) else repr(e)
        ops.exception("api_clean_error", extra={"extra_fields": {"event": "api_clean_error"}})
        raise HTTPException(
            status_code=500,
            detail={
                "error_code": getattr(e, "code", "internal_error"),
                "message": msg,
                "details": {"exception_type": type(e).__name__},
            },
        )

    selection_html = None
    if result["scope"] == "selection":
        selection_html = editor.get_selected_html()

    log_event(
        ops,
        "api_clean_ok",
        trace_id=result["trace_id"],
        scope=result["scope"],
        changed=result["changed"],
        log_id=result["log_id"],
    )
    return CleanResponse(
        trace_id=result["trace_id"],
        scope=result["scope"],
        fallback=result["fallback"],
        changed=result["changed"],
        status=result["status"],
        html=editor.get_data(),
        selection_html=selection_html,
        stats=CleanStatsModel(**result["stats"]),
        error_type=result["error_type"],
        latency_ms=result["latency_ms"],
        log_id=result["log_id"],
        summary=build_clean_summary(result),
    )


@app.get("/api/rules")
def rules():
    """Return the active rule set and the available presets."""
    return {
        "source": get_rule_source(),
        "rules": get_rule_set().to_options(),
        "presets": {
            name: {"deprecated": name in DEPRECATED_PRESETS} for name in PRESETS
        },
    }


@app.get("/api/runs")
def list_runs(limit: int = 10):
    """Return the most recent clean runs and overall totals."""
    return {"runs": get_recent_runs(limit), "totals": get_totals()}


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("api_server:app", host="0.0.0.0", port=8000, reload=True)
