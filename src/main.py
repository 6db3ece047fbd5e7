from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.logger import get_logger
from utils.messages import ModeSwitchedMessage, QuitRequestedMessage, UserLogoutMessage
from utils.state import GlobalState
from views.scr_clients import ClientsScreen
from views.scr_dashboard import DashboardScreen
from views.scr_inventory import InventoryScreen
from views.scr_login import LoginScreen

_logger = get_logger(__name__)


class BioCatApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Cambiar Tema", show=True),
    ]

    MODES = {
        "dashboard": DashboardScreen,
        "inventory": InventoryScreen,
        "clients": ClientsScreen,
    }

    MENU_MODES = {
        "dashboard": "Dashboard",
        "inventory": "Inventario",
        "clients": "Clientes",
    }

    THEMES = {"light": "textual-light", "dark": "textual-dark"}

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/entity.tcss",
        "styles/modals.tcss",
    ]

    state: GlobalState

    def __init__(self, state: GlobalState | None = None):
        super().__init__()
        self.state = state or GlobalState()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.startup()

    @work(exclusive=True, group="startup")
    async def startup(self) -> None:
        await self.state.restore()
        self.theme = self.THEMES[self.state.theme]
        self.main_flow()

    @work()
    async def action_switch_light(self):
        theme = await self.state.toggle_theme()
        self.theme = self.THEMES[theme]
        self.notify("Tema oscuro" if theme == "dark" else "Tema claro")

    async def navigate(self, mode: str) -> None:
        """Switch to a mode, sending the user to login first if needed."""
        if not self.state.is_authenticated:
            self.main_flow()
            return
        self.post_message(ModeSwitchedMessage(self.current_mode, mode))
        await self.switch_mode(mode)

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.logout()
        self.notify("Sesión cerrada.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work(exclusive=True, group="main-flow")
    async def main_flow(self):
        if not self.state.is_authenticated:
            await self.push_screen_wait(LoginScreen())
        _logger.debug(f"Entering dashboard as {self.state.username}")
        await self.navigate("dashboard")


def main() -> None:
    app = BioCatApp()
    app.run()


if __name__ == "__main__":
    main()
