import json
from pathlib import Path

import httpx
import typer

from config.config import get_api_base, get_rule_set, get_rule_source
from config.rules import DEPRECATED_PRESETS, PRESETS
from core.orchestrator import CleanOrchestrator
from integrations.editor_host import InMemoryEditor
from utils.helpers import build_clean_summary

app = typer.Typer(help="Artifact Cleaner CLI: strips authoring artifacts from pasted HTML.")


def _post(path: str, body: dict) -> dict:
    try:
        r = httpx.post(f"{get_api_base()}{path}", json=body, timeout=30.0)
        r.raise_for_status()
    except httpx.ConnectError:
        typer.echo("Error: cannot connect to API server. Start it with: python3 api_server.py", err=True)
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        typer.echo(f"Error {e.response.status_code}: {e.response.text}", err=True)
        raise typer.Exit(1)
    return r.json()


@app.command()
def clean(
    html:            str          = typer.Option(None,  "--html",            "-p", help="Inline HTML"),
    input_file:      Path | None  = typer.Option(None,  "--input-file",      "-f", help="Read HTML from file"),
    output_file:     Path | None  = typer.Option(None,  "--output-file",     "-o", help="Write cleaned HTML to file"),
    selection_start: int | None   = typer.Option(None,  "--selection-start", "-s", help="Selection start offset"),
    selection_end:   int | None   = typer.Option(None,  "--selection-end",   "-e", help="Selection end offset"),
    local:           bool         = typer.Option(False, "--local",           "-l", help="Clean in-process instead of calling the API server"),
    show_summary:    bool         = typer.Option(False, "--summary",               help="Print the run summary instead of the HTML"),
):
    """Clean HTML (or a selected range of it) the way the editor button does."""
    if (selection_start is None) != (selection_end is None):
        typer.echo("Error: --selection-start and --selection-end must be given together", err=True)
        raise typer.Exit(1)

    if input_file:
        text = input_file.read_text(encoding="utf-8")
    elif html is not None:
        text = html
    else:
        typer.echo("Error: provide --html or --input-file", err=True)
        raise typer.Exit(1)

    if local:
        selection = None
        if selection_start is not None:
            selection = (selection_start, selection_end)
        editor = InMemoryEditor(text, selection=selection)
        result = CleanOrchestrator().clean(editor)
        cleaned = editor.get_data()
        summary = build_clean_summary(result)
    else:
        body: dict = {"html": text}
        if selection_start is not None:
            body["selection_start"] = selection_start
        if selection_end is not None:
            body["selection_end"] = selection_end
        result = _post("/api/clean", body)
        cleaned = result["html"]
        summary = result.get("summary", json.dumps(result, indent=2))

    if output_file:
        output_file.write_text(cleaned, encoding="utf-8")
        typer.echo(f"Cleaned HTML saved to {output_file}")
    typer.echo(summary if show_summary else cleaned)


@app.command()
def history(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of recent runs to show"),
):
    """Show recent clean runs from the history log."""
    try:
        r = httpx.get(f"{get_api_base()}/api/runs", params={"limit": limit}, timeout=10.0)
        r.raise_for_status()
    except httpx.ConnectError:
        typer.echo("Error: cannot connect to API server.", err=True)
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        typer.echo(f"Error {e.response.status_code}: {e.response.text}", err=True)
        raise typer.Exit(1)

    data = r.json()
    runs = data.get("runs", [])
    if not runs:
        typer.echo("No runs logged yet.")
        return
    for run in runs:
        changed = "changed" if run.get("changed") else "unchanged"
        fallback = " (fallback)" if run.get("fallback") else ""
        typer.echo(
            f"[{run['timestamp']}] {run['scope']}{fallback} | {changed} | "
            f"{run['input_len']} -> {run['output_len']} chars"
        )
    totals = data.get("totals")
    if totals:
        typer.echo(
            f"Total runs: {totals['runs']} ({totals['changed_runs']} changed), "
            f"artifacts removed: {totals['artifacts_removed']}, blocks pruned: {totals['blocks_pruned']}"
        )


@app.command()
def rules(
    list_all: bool = typer.Option(False, "--list", "-l", help="List all rule presets"),
):
    """Show the active rule set or list all presets."""
    if list_all:
        for name, options in PRESETS.items():
            status = "deprecated" if name in DEPRECATED_PRESETS else "current"
            typer.echo(f"\n[{name}] {status}")
            typer.echo(f"  vendor classes: {len(options.get('vendor_class_substrings', []))}")
            typer.echo(f"  removed attributes: {', '.join(options.get('unconditional_remove_attrs', []))}")
            typer.echo(f"  prune empty blocks: {options.get('prune_empty_blocks', True)}")
        return

    typer.echo(f"Rules: {get_rule_source()}")
    for key, value in get_rule_set().to_options().items():
        typer.echo(f"  {key}: {value}")


if __name__ == "__main__":
    app()
