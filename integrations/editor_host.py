"""Host editor glue for the clean-text-styles command.

`EditorHost` is the contract the orchestrator needs from a rich-text editor.
`InMemoryEditor` is a reference host that keeps the document as an HTML string
and the selection as character offsets; the API server, CLI and tests use it.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from bs4 import BeautifulSoup

from core.errors import SelectionExtractionFailure
from core.html_tree import HTML5_FORMATTER
from core.orchestrator import CleanOrchestrator

COMMAND_NAME = "cleanTextStyles"
BUTTON_LABEL = "Clean Text Styles"


@dataclass(frozen=True)
class Selection:
    start: int
    end: int

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end


class EditorHost(ABC):
    """What the orchestrator needs from a host editor."""

    read_only: bool = False

    def __init__(self) -> None:
        # Registered commands and toolbar controls, keyed by command name.
        self.commands: dict[str, Any] = {}
        self.ui: dict[str, Any] = {}

    @abstractmethod
    def get_selection(self) -> Selection | None: ...

    @abstractmethod
    def get_selected_html(self) -> str:
        """Serialize the current selection. Raises SelectionExtractionFailure if it cannot."""

    @abstractmethod
    def set_selected_html(self, html: str) -> None: ...

    @abstractmethod
    def get_data(self) -> str: ...

    @abstractmethod
    def set_data(self, html: str) -> None: ...

    @abstractmethod
    def batch(self) -> Any:
        """Context manager grouping edits into one undo step."""

    def focus(self) -> None:
        pass


class InMemoryEditor(EditorHost):
    """Reference host: an HTML string document with offset selection and undo/redo."""

    def __init__(self, data: str = "", selection: tuple[int, int] | None = None, read_only: bool = False):
        super().__init__()
        self._data = data
        self._selection = Selection(*selection) if selection is not None else None
        self.read_only = read_only
        self.has_focus = False
        self._undo: list[tuple[str, Selection | None]] = []
        self._redo: list[tuple[str, Selection | None]] = []
        self._batch_depth = 0

    # --- content ---

    def get_data(self) -> str:
        return self._data

    def set_data(self, html: str) -> None:
        with self.batch():
            self._data = _to_model(html)
            self._selection = None

    def get_selection(self) -> Selection | None:
        return self._selection

    def select(self, start: int, end: int) -> None:
        self._selection = Selection(start, end)

    def get_selected_html(self) -> str:
        sel = self._require_selection()
        return self._data[sel.start:sel.end]

    def set_selected_html(self, html: str) -> None:
        sel = self._require_selection()
        converted = _to_model(html)
        with self.batch():
            self._data = self._data[:sel.start] + converted + self._data[sel.end:]
            self._selection = Selection(sel.start, sel.start + len(converted))

    def _require_selection(self) -> Selection:
        sel = self._selection
        if sel is None:
            raise SelectionExtractionFailure("No selection")
        if sel.start < 0 or sel.end > len(self._data) or sel.start > sel.end:
            raise SelectionExtractionFailure(
                f"Selection {sel.start}:{sel.end} outside document of length {len(self._data)}"
            )
        if _inside_tag(self._data, sel.start) or _inside_tag(self._data, sel.end):
            raise SelectionExtractionFailure("Selection boundary falls inside a tag")
        if not _is_balanced(self._data[sel.start:sel.end]):
            raise SelectionExtractionFailure("Selection crosses an element boundary")
        return sel

    # --- undo ---

    @contextmanager
    def batch(self) -> Iterator[None]:
        if self._batch_depth:
            self._batch_depth += 1
            try:
                yield
            finally:
                self._batch_depth -= 1
            return

        snapshot = (self._data, self._selection)
        self._batch_depth = 1
        try:
            yield
        except Exception:
            self._data, self._selection = snapshot
            raise
        finally:
            self._batch_depth = 0
        if self._data != snapshot[0]:
            self._undo.append(snapshot)
            self._redo.clear()

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append((self._data, self._selection))
        self._data, self._selection = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append((self._data, self._selection))
        self._data, self._selection = self._redo.pop()
        return True

    def focus(self) -> None:
        self.has_focus = True


def _inside_tag(data: str, pos: int) -> bool:
    """True if `pos` sits between a '<' and its closing '>'."""
    return data.rfind("<", 0, pos) > data.rfind(">", 0, pos)


_TAG_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9:-]*)[^>]*?(/?)>")
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


def _is_balanced(fragment: str) -> bool:
    """True if every element opened in `fragment` is closed in it, and vice versa.

    Both ends of a balanced slice share the same parent element.
    """
    stack: list[str] = []
    for closing, name, self_closing in _TAG_RE.findall(_COMMENT_RE.sub("", fragment)):
        name = name.lower()
        if name in _VOID_TAGS or self_closing:
            continue
        if not closing:
            stack.append(name)
        elif not stack or stack.pop() != name:
            return False
    return not stack


_BARE_SPAN_RE = re.compile(r"<span[\s>]", re.IGNORECASE)


def _to_model(html: str) -> str:
    """Host model conversion: attribute-less <span> wrappers have no model representation."""
    if not _BARE_SPAN_RE.search(html):
        return html
    soup = BeautifulSoup(html, "html.parser")
    bare = [span for span in soup.find_all("span") if not span.attrs]
    if not bare:
        return html
    for span in bare:
        span.unwrap()
    return soup.decode(formatter=HTML5_FORMATTER)


class CleanTextStylesCommand:
    """The `cleanTextStyles` editor command. Not re-entrant."""

    name = COMMAND_NAME

    def __init__(self, editor: EditorHost, orchestrator=None):
        self.editor = editor
        self.orchestrator = orchestrator or CleanOrchestrator()
        self._executing = False

    @property
    def is_enabled(self) -> bool:
        return not self.editor.read_only and not self._executing

    def execute(self) -> dict | None:
        if not self.is_enabled:
            return None
        self._executing = True
        try:
            return self.orchestrator.clean(self.editor)
        finally:
            self._executing = False


class ToolbarButton:
    """Toolbar control bound to a command; returns focus to the editor after running it."""

    def __init__(self, editor: EditorHost, command: CleanTextStylesCommand,
                 label: str = BUTTON_LABEL, on_execute: Callable[[dict | None], None] | None = None):
        self.editor = editor
        self.command = command
        self.label = label
        self.tooltip = True
        self.on_execute = on_execute

    @property
    def is_enabled(self) -> bool:
        return self.command.is_enabled

    def press(self) -> dict | None:
        result = self.command.execute()
        if self.on_execute is not None:
            self.on_execute(result)
        self.editor.focus()
        return result


def register_clean_text_styles(editor: EditorHost, orchestrator=None) -> tuple[CleanTextStylesCommand, ToolbarButton]:
    """Register the command and its toolbar button on an editor."""
    command = CleanTextStylesCommand(editor, orchestrator)
    button = ToolbarButton(editor, command)
    editor.commands[COMMAND_NAME] = command
    editor.ui[COMMAND_NAME] = button
    return command, button
