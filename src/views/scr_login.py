from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label

from utils.messages import UserLoginMessage
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal


class LoginScreen(BaseScreen):
    """
    Dismissed once the user has logged in.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Iniciar Sesión", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-login"):
            yield Label("BIO - CAT", id="label-brand")
            yield Label("Arena de Tofu Biodegradable para Gato", id="label-tagline")
            yield Label("Usuario")
            yield Input(placeholder="Ingresa tu usuario", id="input-login-user")
            yield Label("Contraseña")
            yield Input(
                placeholder="Ingresa tu contraseña", password=True, id="input-login-pwd"
            )
            with Horizontal(id="div-login-btns"):
                yield Button("Salir", id="btn-quit")
                yield Button("Ingresar", id="btn-login", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-user").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        username = self.query_one("#input-login-user", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value.strip()

        if not username or not pwd:
            self.notify("Por favor, completa todos los campos", severity="warning")
            return

        if await self.app.state.login(username, pwd):
            self.notify(f"¡Bienvenida de nuevo, {self.app.state.username}!")
            self.app.post_message(UserLoginMessage())
            self.dismiss()
        else:
            self.notify("Usuario o contraseña incorrectos", severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
