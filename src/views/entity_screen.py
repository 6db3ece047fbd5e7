from __future__ import annotations

import asyncio
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Select

from db.crud import Collection
from utils import spreadsheet
from utils.errors import ImportParseError, NotFoundError, ValidationError
from utils.logger import get_logger
from utils.messages import CollectionChangedMessage
from utils.pure import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, Page, parse_bound
from utils.state import ListingState
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmDeleteModal
from views.modal_entity_detail import EntityDetailModal
from views.modal_entity_form import EntityFormModal, FormField
from views.modal_path_prompt import PathPromptModal

_logger = get_logger(__name__)


class EntityScreen(BaseScreen):
    """
    Shared table screen for one collection: search, category filter,
    optional numeric range filter, pagination, CRUD and xlsx import/export.

    Subclasses set the class attributes below and implement row_cells
    and detail_rows.
    """

    COLLECTION: ClassVar[str] = ""  # attribute name on GlobalState
    ENTITY_NAME: ClassVar[str] = ""  # "Producto"
    ENTITY_PLURAL: ClassVar[str] = ""  # "productos"
    TABLE_COLUMNS: ClassVar[Tuple[str, ...]] = ()
    FORM_FIELDS: ClassVar[Tuple[FormField, ...]] = ()

    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ("name",)
    SEARCH_PLACEHOLDER: ClassVar[str] = "Buscar..."
    CATEGORY_FIELD: ClassVar[Optional[str]] = None
    CATEGORY_PROMPT: ClassVar[str] = "Todas las ubicaciones"
    RANGE_FIELD: ClassVar[Optional[str]] = None
    RANGE_LABELS: ClassVar[Tuple[str, str]] = ("Mínimo", "Máximo")

    SHEET_COLUMNS: ClassVar[Sequence[spreadsheet.Column]] = ()
    SHEET_NAME: ClassVar[str] = ""
    EXPORT_PREFIX: ClassVar[str] = ""
    TEMPLATE_NAME: ClassVar[str] = ""  # empty hides the template button
    TEMPLATE_SHEET: ClassVar[str] = ""

    CLEAR_BUTTON: ClassVar[str] = "Vaciar"
    CLEAR_TITLE: ClassVar[str] = ""
    CLEAR_CAPTION: ClassVar[str] = ""
    CLEARED_TEXT: ClassVar[str] = ""
    EXPORTED_TEXT: ClassVar[str] = "Archivo exportado"

    def __init__(self) -> None:
        super().__init__()
        self.listing = ListingState(
            search_fields=self.SEARCH_FIELDS,
            category_field=self.CATEGORY_FIELD,
            range_field=self.RANGE_FIELD,
        )
        self._page_ids: List[str] = []
        self._category_options: List[str] = []
        self._ready = False

    # ---- subclass hooks ----

    def row_cells(self, entity: Any) -> Tuple[Any, ...]:
        raise NotImplementedError

    def detail_rows(self, entity: Any) -> List[Tuple[str, str]]:
        raise NotImplementedError

    def form_values(self, entity: Any) -> Dict[str, Any]:
        return {f.name: getattr(entity, f.name) for f in self.FORM_FIELDS}

    @property
    def collection(self) -> Collection:
        return getattr(self.app.state, self.COLLECTION)

    # ---- layout ----

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-entity"):
            with Horizontal(id="hort-actions"):
                yield Button("Agregar", id="btn-add", variant="primary")
                yield Button("Ver", id="btn-view")
                yield Button("Editar", id="btn-edit")
                yield Button("Eliminar", id="btn-delete", variant="warning")
                yield Button(self.CLEAR_BUTTON, id="btn-clear", variant="error")
                yield Button("Importar", id="btn-import")
                yield Button("Exportar", id="btn-export", variant="success")
                if self.TEMPLATE_NAME:
                    yield Button("Formato", id="btn-template")
            with Horizontal(id="hort-filters"):
                yield Input(id="input-search", placeholder=self.SEARCH_PLACEHOLDER)
                yield Select(
                    [], prompt=self.CATEGORY_PROMPT, id="select-category"
                )
                if self.RANGE_FIELD:
                    yield Input(
                        placeholder=self.RANGE_LABELS[0], id="input-min", type="integer"
                    )
                    yield Input(
                        placeholder=self.RANGE_LABELS[1], id="input-max", type="integer"
                    )
            yield DataTable(id="table-entities")
            with Horizontal(id="hort-table-control"):
                yield Label("", id="label-range")
                yield Select(
                    [(f"{n} por página", n) for n in PAGE_SIZE_OPTIONS],
                    value=DEFAULT_PAGE_SIZE,
                    allow_blank=False,
                    id="select-page-size",
                )
                yield Button("<", id="btn-prev")
                yield Label(" 1 / 1 ", id="label-page")
                yield Button(">", id="btn-next")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*self.TABLE_COLUMNS)

        self._ready = True
        self.refresh_table()
        self.query_one("#input-search").focus()

    # ---- view ----

    def refresh_table(self) -> Optional[Page]:
        if not self._ready:
            return None
        self._sync_category_options()

        page = self.listing.view(self.collection.list())
        table = self.query_one(DataTable)
        table.clear()
        self._page_ids = []
        for entity in page.items:
            table.add_row(*self.row_cells(entity))
            self._page_ids.append(entity.id)

        if page.total:
            range_text = f"Mostrando {page.start} a {page.end} de {page.total}"
        else:
            range_text = f"No hay {self.ENTITY_PLURAL} para mostrar"
        self.query_one("#label-range", Label).content = range_text
        self.query_one("#label-page", Label).content = (
            f" {page.page} / {page.page_count} "
        )
        self.query_one("#btn-prev", Button).disabled = not page.has_prev
        self.query_one("#btn-next", Button).disabled = not page.has_next
        return page

    def _sync_category_options(self) -> None:
        if not self.CATEGORY_FIELD:
            return
        options = self.collection.distinct(self.CATEGORY_FIELD)
        if options == self._category_options:
            return
        self._category_options = options
        select = self.query_one("#select-category", Select)
        select.set_options([(o, o) for o in options])
        if self.listing.category in options:
            select.value = self.listing.category
        else:
            self.listing.set_category("")

    def selected_entity(self) -> Optional[Any]:
        table = self.query_one(DataTable)
        if table.row_count == 0 or table.cursor_row is None:
            return None
        if not 0 <= table.cursor_row < len(self._page_ids):
            return None
        return self.collection.get(self._page_ids[table.cursor_row])

    def _changed(self) -> None:
        self.listing.data_changed()
        self.refresh_table()
        self.app.post_message(CollectionChangedMessage(self.collection.storage_key))

    # ---- filters & paging ----

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.refresh_table()

    @on(Input.Changed, "#input-search")
    def handle_search(self, event: Input.Changed) -> None:
        self.listing.set_search(event.value)
        self.refresh_table()

    @on(Input.Changed, "#input-min")
    @on(Input.Changed, "#input-max")
    def handle_range(self) -> None:
        self.listing.set_range(
            parse_bound(self.query_one("#input-min", Input).value),
            parse_bound(self.query_one("#input-max", Input).value),
        )
        self.refresh_table()

    @on(Select.Changed, "#select-category")
    def handle_category(self, event: Select.Changed) -> None:
        category = event.value if isinstance(event.value, str) else ""
        if category != self.listing.category:
            self.listing.set_category(category)
            self.refresh_table()

    @on(Select.Changed, "#select-page-size")
    def handle_page_size(self, event: Select.Changed) -> None:
        if isinstance(event.value, int) and event.value != self.listing.page_size:
            self.listing.set_page_size(event.value)
            self.refresh_table()

    @on(Button.Pressed, "#btn-prev")
    def handle_prev(self) -> None:
        self.listing.set_page(self.listing.page - 1)
        self.refresh_table()

    @on(Button.Pressed, "#btn-next")
    def handle_next(self) -> None:
        self.listing.set_page(self.listing.page + 1)
        self.refresh_table()

    # ---- CRUD ----

    def _require_selection(self) -> Optional[Any]:
        entity = self.selected_entity()
        if entity is None:
            self.notify(
                f"Selecciona un {self.ENTITY_NAME.lower()} de la tabla.",
                severity="warning",
            )
        return entity

    @on(Button.Pressed, "#btn-add")
    @work(exclusive=True, group="entity-form")
    async def handle_add(self) -> None:
        values = await self.app.push_screen_wait(
            EntityFormModal(f"Agregar {self.ENTITY_NAME}", self.FORM_FIELDS)
        )
        if values is None:
            return
        try:
            await self.collection.create(values)
        except ValidationError:
            self.notify(
                "Por favor completa todos los campos requeridos", severity="warning"
            )
            return
        self.notify(f"{self.ENTITY_NAME} agregado correctamente")
        self._changed()

    @on(Button.Pressed, "#btn-edit")
    @work(exclusive=True, group="entity-form")
    async def handle_edit(self) -> None:
        entity = self._require_selection()
        if entity is None:
            return
        values = await self.app.push_screen_wait(
            EntityFormModal(
                f"Editar {self.ENTITY_NAME}",
                self.FORM_FIELDS,
                initial=self.form_values(entity),
                submit_text="Actualizar",
            )
        )
        if values is None:
            return
        try:
            await self.collection.update(entity.id, values)
        except ValidationError:
            self.notify(
                "Por favor completa todos los campos requeridos", severity="warning"
            )
            return
        except NotFoundError:
            _logger.error(f"Tried to edit missing {self.COLLECTION} {entity.id}")
            self.notify(f"El {self.ENTITY_NAME.lower()} ya no existe.", severity="error")
            self.refresh_table()
            return
        self.notify(f"{self.ENTITY_NAME} actualizado correctamente")
        self._changed()

    @on(DataTable.RowSelected)
    @on(Button.Pressed, "#btn-view")
    @work(exclusive=True, group="entity-form")
    async def handle_view(self) -> None:
        entity = self._require_selection()
        if entity is None:
            return
        await self.app.push_screen_wait(
            EntityDetailModal(f"{self.ENTITY_NAME}: {entity.name}", self.detail_rows(entity))
        )

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True, group="entity-form")
    async def handle_delete(self) -> None:
        entity = self._require_selection()
        if entity is None:
            return
        if not await self.app.push_screen_wait(
            ConfirmDeleteModal(
                f"¿Eliminar {self.ENTITY_NAME}?",
                f"¿Estás seguro de eliminar «{entity.name}»? "
                "Esta acción no se puede deshacer.",
            )
        ):
            return
        await self.collection.delete(entity.id)
        self.notify(f"{self.ENTITY_NAME} eliminado")
        self._changed()

    @on(Button.Pressed, "#btn-clear")
    @work(exclusive=True, group="entity-form")
    async def handle_clear(self) -> None:
        if not len(self.collection):
            self.notify(f"No hay {self.ENTITY_PLURAL} registrados.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            ConfirmDeleteModal(self.CLEAR_TITLE, self.CLEAR_CAPTION)
        ):
            return
        await self.collection.clear()
        self.notify(self.CLEARED_TEXT)
        self._changed()

    # ---- spreadsheet ----

    @on(Button.Pressed, "#btn-import")
    @work(exclusive=True, group="entity-file")
    async def handle_import(self) -> None:
        path = await self.app.push_screen_wait(
            PathPromptModal("Archivo a importar (.xlsx)", action_text="Importar")
        )
        if not path:
            return
        try:
            records = await asyncio.to_thread(
                spreadsheet.read_records,
                path,
                self.SHEET_COLUMNS,
                self.collection.required_fields,
            )
        except ImportParseError:
            self.notify("Error al importar archivo", severity="error")
            return
        added = await self.collection.extend(records)
        self.notify(f"{len(added)} {self.ENTITY_PLURAL} importados")
        self._changed()

    @on(Button.Pressed, "#btn-export")
    @work(exclusive=True, group="entity-file")
    async def handle_export(self) -> None:
        entities = self.collection.list()
        if not entities:
            self.notify(
                f"No hay {self.ENTITY_PLURAL} para exportar", severity="warning"
            )
            return
        path = await self.app.push_screen_wait(
            PathPromptModal(
                "Guardar como",
                default=spreadsheet.default_export_name(self.EXPORT_PREFIX),
                action_text="Exportar",
            )
        )
        if not path:
            return
        try:
            await asyncio.to_thread(
                spreadsheet.export_workbook,
                entities,
                self.SHEET_COLUMNS,
                path,
                self.SHEET_NAME,
            )
        except OSError as e:
            _logger.error(f"Export to {path} failed: {e}")
            self.notify("No se pudo guardar el archivo", severity="error")
            return
        self.notify(self.EXPORTED_TEXT)

    @on(Button.Pressed, "#btn-template")
    @work(exclusive=True, group="entity-file")
    async def handle_template(self) -> None:
        path = await self.app.push_screen_wait(
            PathPromptModal(
                "Guardar formato como", default=self.TEMPLATE_NAME, action_text="Guardar"
            )
        )
        if not path:
            return
        try:
            await asyncio.to_thread(
                spreadsheet.write_template, path, self.SHEET_COLUMNS, self.TEMPLATE_SHEET
            )
        except OSError as e:
            _logger.error(f"Template write to {path} failed: {e}")
            self.notify("No se pudo guardar el archivo", severity="error")
            return
        self.notify("Formato descargado")
