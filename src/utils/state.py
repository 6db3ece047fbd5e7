from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Sequence

import db.crud as crud
from utils.logger import get_logger
from utils.pure import DEFAULT_PAGE_SIZE, Page, filter_entities, paginate

_logger = get_logger(__name__)

Theme = Literal["light", "dark"]


@dataclass
class GlobalState:
    """
    Application context shared by screens, owned by the App.

    Fields:
      - username: logged-in user, None when logged out
      - theme: "light" | "dark", persisted apart from the session
      - products / clients: the write-through collections
    """

    username: Optional[str] = None
    theme: Theme = "light"
    products: crud.ProductCollection = field(default_factory=crud.ProductCollection)
    clients: crud.ClientCollection = field(default_factory=crud.ClientCollection)

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None

    async def restore(self) -> None:
        """Rebuild everything from the store; called once at start-up."""
        session = await crud.load_session()
        self.username = session.user.username if session.is_authenticated else None
        self.theme = await crud.load_theme()
        await self.products.load()
        await self.clients.load()
        _logger.debug(f"State restored, user={self.username}, theme={self.theme}")

    async def login(self, username: str, password: str) -> bool:
        user = await crud.login(username, password)
        if user is None:
            return False
        self.username = user.username
        return True

    async def logout(self) -> None:
        await crud.logout()
        self.username = None

    async def toggle_theme(self) -> Theme:
        self.theme = "dark" if self.theme == "light" else "light"
        await crud.save_theme(self.theme)
        return self.theme


@dataclass
class ListingState:
    """
    Transient view state of one entity table: filters plus the current page.
    Changing any filter, the page size or the data itself sends the view
    back to page 1.
    """

    search_fields: Sequence[str] = ("name",)
    category_field: Optional[str] = None
    range_field: Optional[str] = None

    search: str = ""
    category: str = ""
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def set_search(self, term: str) -> None:
        self.search = term
        self.page = 1

    def set_category(self, category: str) -> None:
        self.category = category
        self.page = 1

    def set_range(self, min_value: Optional[int], max_value: Optional[int]) -> None:
        self.min_value = min_value
        self.max_value = max_value
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        self.page_size = page_size
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = max(1, page)

    def data_changed(self) -> None:
        """The underlying collection was mutated, so start over from page 1."""
        self.page = 1

    def filtered(self, entities: Sequence[Any]) -> list:
        return filter_entities(
            entities,
            search=self.search,
            search_fields=self.search_fields,
            category_field=self.category_field,
            category=self.category,
            range_field=self.range_field,
            min_value=self.min_value,
            max_value=self.max_value,
        )

    def view(self, entities: Sequence[Any]) -> Page:
        page = paginate(self.filtered(entities), self.page, self.page_size)
        self.page = page.page
        return page
