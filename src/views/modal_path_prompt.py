from typing import Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label


class PathPromptModal(ModalScreen[Optional[str]]):
    """
    Asks for a spreadsheet path (import source or export target).
    Returns the path typed in, or None on cancel.
    """

    def __init__(self, caption: str, default: str = "", action_text: str = "OK"):
        super().__init__()
        self.caption = caption
        self.default = default
        self.action_text = action_text

    def compose(self) -> ComposeResult:
        with Vertical(id="div-path"):
            yield Label(self.caption)
            yield Input(
                value=self.default, placeholder="archivo.xlsx", id="input-path"
            )
            with Horizontal(id="div-path-btns"):
                yield Button("Cancelar", id="btn-cancel")
                yield Button(self.action_text, id="btn-ok", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#input-path", Input).focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Input.Submitted)
    @on(Button.Pressed, "#btn-ok")
    def handle_ok(self) -> None:
        path_input = self.query_one("#input-path", Input)
        path = path_input.value.strip()
        if not path:
            path_input.add_class("-invalid")
            path_input.focus()
            self.notify("Indica la ruta del archivo.", severity="error")
            return
        self.dismiss(path)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)
