from typing import Dict, Literal, Tuple

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from utils.messages import QuitRequestedMessage

Tone = Literal["default", "positive", "warning", "error"]
ButtonVariant = Literal["primary", "default", "success", "warning", "error"]


class DialogModal(ModalScreen[bool]):
    """
    Yes/no box. Dismisses True on the confirm button, False on the
    cancel button or escape.
    """

    # tone -> (confirm variant, cancel variant)
    TONES: Dict[str, Tuple[ButtonVariant, ButtonVariant]] = {
        "default": ("primary", "default"),
        "positive": ("success", "default"),
        "warning": ("warning", "default"),
        "error": ("error", "primary"),
    }

    def __init__(
        self,
        caption: str,
        confirm_text: str = "Aceptar",
        cancel_text: str = "",
        tone: Tone = "default",
        title: str = "",
    ):
        super().__init__()
        self.caption = caption
        self.confirm_text = confirm_text
        self.cancel_text = cancel_text
        self.tone = tone
        self.title_text = title

    def compose(self) -> ComposeResult:
        confirm_variant, cancel_variant = self.TONES[self.tone]
        with Container(id="div-dialog", classes=f"-{self.tone}"):
            if self.title_text:
                yield Label(self.title_text, id="dialog-title")
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                if self.cancel_text:
                    yield Button(self.cancel_text, variant=cancel_variant, id="btn-cancel")
                yield Button(self.confirm_text, variant=confirm_variant, id="btn-confirm")

    def on_mount(self) -> None:
        if self.cancel_text and self.tone == "error":
            self.query_one("#btn-cancel").focus()
        else:
            self.query_one("#btn-confirm").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.cancel()

    @on(Button.Pressed, "#btn-confirm")
    def handle_confirm(self) -> None:
        self.confirm()

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.cancel()

    def confirm(self) -> None:
        self.dismiss(True)

    def cancel(self) -> None:
        self.dismiss(False)


class ConfirmDeleteModal(DialogModal):
    def __init__(self, title: str, caption: str):
        super().__init__(caption, "Eliminar", "Cancelar", "error", title=title)


class LogoutDialogModal(DialogModal):
    def __init__(self):
        super().__init__("¿Seguro que deseas cerrar sesión?", "Sí", "No", "warning")


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("¿Seguro que deseas salir?", "Sí", "No", "error")

    def confirm(self) -> None:
        self.post_message(QuitRequestedMessage())
        super().confirm()
