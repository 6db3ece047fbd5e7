from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Sequence

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: Literal["text", "integer", "number"] = "text"
    placeholder: str = ""
    required: bool = False


class EntityFormModal(ModalScreen[Optional[Dict[str, Any]]]):
    """
    Create/edit form. Holds only the draft values; the caller does the write.
    Dismisses with the field dict, or None when cancelled.
    """

    def __init__(
        self,
        title: str,
        fields: Sequence[FormField],
        initial: Optional[Dict[str, Any]] = None,
        submit_text: str = "Guardar",
    ) -> None:
        super().__init__()
        self.title_text = title
        self.fields = list(fields)
        self.initial = initial or {}
        self.submit_text = submit_text

    def compose(self) -> ComposeResult:
        with Vertical(id="div-form"):
            yield Label(self.title_text, id="form-title")
            with VerticalScroll():
                for f in self.fields:
                    yield Label(f.label + (" *" if f.required else ""))
                    value = self.initial.get(f.name, "" if f.kind == "text" else 0)
                    yield Input(
                        value=str(value),
                        placeholder=f.placeholder,
                        id=f"input-{f.name}",
                        type=f.kind,
                        validators=[Number(minimum=0)] if f.kind != "text" else [],
                    )
            with Horizontal(id="div-form-btns"):
                yield Button("Cancelar", id="btn-cancel")
                yield Button(self.submit_text, id="btn-submit", variant="primary")

    def on_mount(self) -> None:
        if self.fields:
            self.query_one(f"#input-{self.fields[0].name}", Input).focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    def collect(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for f in self.fields:
            raw = self.query_one(f"#input-{f.name}", Input).value.strip()
            if f.kind == "integer":
                values[f.name] = int(raw) if raw.lstrip("-").isdigit() else 0
            elif f.kind == "number":
                try:
                    values[f.name] = float(raw)
                except ValueError:
                    values[f.name] = 0.0
            else:
                values[f.name] = raw
        return values

    @on(Input.Submitted)
    @on(Button.Pressed, "#btn-submit")
    def handle_submit(self) -> None:
        missing = []
        for f in self.fields:
            widget = self.query_one(f"#input-{f.name}", Input)
            if f.required and not widget.value.strip():
                widget.add_class("-invalid")
                missing.append(widget)
            elif f.kind != "text" and widget.value.strip() and not widget.is_valid:
                widget.add_class("-invalid")
                missing.append(widget)
            else:
                widget.remove_class("-invalid")

        if missing:
            missing[0].focus()
            self.notify(
                "Por favor completa todos los campos requeridos", severity="warning"
            )
            return

        self.dismiss(self.collect())

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)
