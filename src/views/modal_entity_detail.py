from typing import List, Tuple

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer

from utils.pure import generate_markdown_table


class EntityDetailModal(ModalScreen[bool]):
    """
    read-only view of one product or client
    """

    def __init__(self, title: str, rows: List[Tuple[str, str]]) -> None:
        super().__init__()
        self.title_text = title
        self.rows = rows

    def compose(self) -> ComposeResult:
        with Vertical(id="div-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Horizontal(id="div-detail-btns"):
                yield Button("Cerrar", id="btn-close", variant="primary")

    async def on_mount(self) -> None:
        md_table = generate_markdown_table(
            ["Campo", "Valor"], [list(r) for r in self.rows], ["l", "l"]
        )
        await self.query_one(MarkdownViewer).document.update(
            f"### {self.title_text}\n\n" + md_table
        )
        self.query_one("#btn-close").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-close")
    def handle_close(self) -> None:
        self.dismiss(True)
