from contextlib import contextmanager

import pytest

from core.errors import SelectionExtractionFailure
from integrations.editor_host import (
    BUTTON_LABEL,
    COMMAND_NAME,
    CleanTextStylesCommand,
    EditorHost,
    InMemoryEditor,
    register_clean_text_styles,
)
from core.orchestrator import CleanOrchestrator


@pytest.fixture
def orchestrator():
    return CleanOrchestrator(history=False)


class TestInMemoryEditor:
    def test_selected_html_is_the_offset_range(self):
        editor = InMemoryEditor("<p>Hello world</p>", selection=(3, 8))
        assert editor.get_selected_html() == "Hello"

    @pytest.mark.parametrize("selection", [(5, 2), (0, 99), (-1, 3)])
    def test_invalid_ranges_cannot_be_extracted(self, selection):
        editor = InMemoryEditor("<p>Hello</p>", selection=selection)
        with pytest.raises(SelectionExtractionFailure):
            editor.get_selected_html()

    def test_boundary_inside_tag_cannot_be_extracted(self):
        editor = InMemoryEditor('<p class="x">Hello</p>', selection=(4, 18))
        with pytest.raises(SelectionExtractionFailure):
            editor.get_selected_html()

    @pytest.mark.parametrize("selection", [(4, 11), (3, 14), (14, 20), (11, 16)])
    def test_selection_across_element_boundaries_cannot_be_extracted(self, selection):
        editor = InMemoryEditor("<p>a</p><p><b>bc</b></p>", selection=selection)
        with pytest.raises(SelectionExtractionFailure):
            editor.get_selected_html()

    def test_balanced_selection_with_void_and_comment(self):
        doc = "<p>a<br><!-- <b> --><em>b</em></p>"
        editor = InMemoryEditor(doc, selection=(3, len(doc) - 4))
        assert editor.get_selected_html() == "a<br><!-- <b> --><em>b</em>"

    def test_no_selection_cannot_be_extracted(self):
        with pytest.raises(SelectionExtractionFailure):
            InMemoryEditor("<p>x</p>").get_selected_html()

    def test_bare_spans_unwrapped_on_write(self):
        editor = InMemoryEditor("")
        editor.set_data('<p><span>a</span> <span class="keep">b</span></p>')
        assert editor.get_data() == '<p>a <span class="keep">b</span></p>'

    def test_replacing_selection_moves_selection_over_new_content(self):
        editor = InMemoryEditor("<p>Hello world</p>", selection=(3, 8))
        editor.set_selected_html("Hi")
        assert editor.get_data() == "<p>Hi world</p>"
        assert editor.get_selected_html() == "Hi"

    def test_nested_batches_make_one_undo_step(self):
        editor = InMemoryEditor("<p>a</p>")
        with editor.batch():
            editor.set_data("<p>b</p>")
            editor.set_data("<p>c</p>")
        assert editor.undo_depth == 1
        editor.undo()
        assert editor.get_data() == "<p>a</p>"

    def test_failed_batch_rolls_back(self):
        editor = InMemoryEditor("<p>a</p>")
        with pytest.raises(RuntimeError):
            with editor.batch():
                editor.set_data("<p>b</p>")
                raise RuntimeError("boom")
        assert editor.get_data() == "<p>a</p>"
        assert editor.undo_depth == 0

    def test_undo_redo_on_empty_history(self):
        editor = InMemoryEditor("<p>a</p>")
        assert editor.undo() is False
        assert editor.redo() is False


class TestCommandAndButton:
    def test_registration(self, orchestrator):
        editor = InMemoryEditor("<p>x</p>")
        command, button = register_clean_text_styles(editor, orchestrator)
        assert editor.commands[COMMAND_NAME] is command
        assert editor.ui[COMMAND_NAME] is button
        assert button.label == BUTTON_LABEL
        assert button.tooltip is True

    def test_button_cleans_and_returns_focus(self, orchestrator):
        editor = InMemoryEditor('<p class="MsoNormal">&nbsp;</p><p>Keep me</p>')
        _, button = register_clean_text_styles(editor, orchestrator)
        result = button.press()

        assert result["changed"] is True
        assert editor.get_data() == "<p>Keep me</p>"
        assert editor.has_focus is True

    def test_disabled_when_read_only(self, orchestrator):
        html = '<p style="x">Hi</p>'
        editor = InMemoryEditor(html, read_only=True)
        command, button = register_clean_text_styles(editor, orchestrator)

        assert command.is_enabled is False
        assert button.is_enabled is False
        assert button.press() is None
        assert editor.get_data() == html
        assert editor.has_focus is True

    def test_command_is_not_re_entrant(self):
        seen = {}

        class _Probe:
            def clean(self, editor):
                seen["enabled_during_run"] = command.is_enabled
                seen["nested"] = command.execute()
                return {"changed": False}

        editor = InMemoryEditor("<p>x</p>")
        command = CleanTextStylesCommand(editor, _Probe())
        assert command.execute() == {"changed": False}
        assert seen == {"enabled_during_run": False, "nested": None}
        assert command.is_enabled is True

    def test_button_callback_receives_result(self, orchestrator):
        editor = InMemoryEditor('<p lang="en">x</p>')
        received = []
        command, button = register_clean_text_styles(editor, orchestrator)
        button.on_execute = received.append
        button.press()
        assert received[0]["status"] == "changed"


class _ViewerHost(EditorHost):
    read_only = True

    def get_selection(self):
        return None

    def get_selected_html(self):
        raise SelectionExtractionFailure("No selection")

    def set_selected_html(self, html):
        raise NotImplementedError

    def get_data(self):
        return "<p>x</p>"

    def set_data(self, html):
        raise NotImplementedError

    @contextmanager
    def batch(self):
        yield


def test_registration_on_any_host(orchestrator):
    host = _ViewerHost()
    command, button = register_clean_text_styles(host, orchestrator)
    assert host.commands == {COMMAND_NAME: command}
    assert host.ui == {COMMAND_NAME: button}
    assert button.press() is None
