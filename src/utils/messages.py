from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired when user logged in, so the screens can refresh
    """

    bubble = True


class CollectionChangedMessage(Message):
    """
    Fired after products or clients were created, edited, deleted or imported.
    The dashboard listens to it to recompute its summary.

    If posted from outside a screen, post at App level
    """

    bubble = True

    def __init__(self, storage_key: str) -> None:
        super().__init__()
        self.storage_key = storage_key


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
