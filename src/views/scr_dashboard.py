from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import MarkdownViewer

from utils.currency import format_boliviano
from utils.messages import CollectionChangedMessage, ModeSwitchedMessage
from utils.pure import LOW_STOCK_THRESHOLD, inventory_summary
from views.base_screen import BaseScreen


def render_dashboard(summary: dict, username: str) -> str:
    return (
        f"### Hola, {username}\n\n"
        "#### Inventario\n\n"
        f"- Productos registrados: {summary['total_products']}\n"
        f"- Unidades en stock: {summary['total_units']}\n"
        f"- Valor al costo: {format_boliviano(summary['cost_value'])}\n"
        f"- Valor a precio de venta: {format_boliviano(summary['sale_value'])}\n"
        f"- Productos con stock bajo (< {LOW_STOCK_THRESHOLD}): "
        f"{summary['low_stock_products']}\n\n"
        "#### Clientes\n\n"
        f"- Clientes registrados: {summary['total_clients']}\n"
    )


class DashboardScreen(BaseScreen):
    """
    Landing screen after login: stock and client totals.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)

    def on_mount(self) -> None:
        self.handle_reload()

    @on(CollectionChangedMessage)
    @on(ScreenResume)
    @on(ModeSwitchedMessage)
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        state = self.app.state
        summary = inventory_summary(state.products.list(), state.clients.list())
        md = render_dashboard(summary, state.username or "")
        await self.query_one("#md-dashboard", MarkdownViewer).document.update(md)
