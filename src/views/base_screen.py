from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import Resize
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.messages import UserLoginMessage, UserLogoutMessage
from utils.pure import generate_markdown_table
from views.modal_dialog import LogoutDialogModal, QuitDialogModal
from views.modal_resize import ResizeScreenPromptModal


class Sidebar(Container):
    init_mode = ""

    def compose(self) -> ComposeResult:
        yield Label("Usuario", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Salir", id="btn-logout", variant="error")
        yield Label("Menú", id="label-info-2")
        yield ListView(id="list-menu")

    async def on_mount(self):
        self.init_mode = self.app.current_mode

        state = self.app.state
        if state.is_authenticated:
            table_rows = [
                ["Usuario", state.username],
                ["Tema", "Oscuro" if state.theme == "dark" else "Claro"],
            ]
            md_table_str = generate_markdown_table(None, table_rows, ["l", "l"])
            await self.query_one(Markdown).update(f"Hola, {state.username}\n\n{md_table_str}")

            list_menu: ListView = self.query_one("#list-menu")
            await list_menu.clear()
            await list_menu.extend(
                [
                    ListItem(Label(v), id="list-menu-item-" + k)
                    for k, v in self.app.MENU_MODES.items()
                ]
            )
            self.highlight_item(self.init_mode)

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        self.highlight_item(self.init_mode)
        if self.app.current_mode != selected_mode:
            await self.app.navigate(selected_mode)

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(LogoutDialogModal()):
            return

        self.post_message(UserLogoutMessage())

    def highlight_item(self, mode_str: str):
        list_menu = self.query_one("#list-menu")
        for item in list_menu.children:
            item.highlighted = mode_str in item.id


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Salir", show=True),
    ]

    MIN_WIDTH = 80
    MIN_HEIGHT = 24

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        """
        configure behavior of the base screen
        """
        self.app.title = "BIO - CAT"
        self.sub_title = header_sub_title or "Gestión de Inventario"
        for k, v in self.app.MODES.items():
            if isinstance(self, v) and k in self.app.MENU_MODES:
                self.sub_title = self.app.MENU_MODES[k]

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def on_resize(self, event: Resize) -> None:
        if event.size.width < self.MIN_WIDTH or event.size.height < self.MIN_HEIGHT:
            self.app.push_screen(
                ResizeScreenPromptModal(self.MIN_WIDTH, self.MIN_HEIGHT)
            )

    @on(UserLoginMessage)
    def handle_user_login(self):
        self.refresh()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
