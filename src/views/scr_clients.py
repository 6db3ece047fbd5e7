from typing import Any, List, Tuple

from db.models import Client
from utils import spreadsheet
from views.entity_screen import EntityScreen
from views.modal_entity_form import FormField


class ClientsScreen(EntityScreen):
    """
    Clients: search by name or contact, filter by shipping location.
    """

    COLLECTION = "clients"
    ENTITY_NAME = "Cliente"
    ENTITY_PLURAL = "clientes"
    TABLE_COLUMNS = ("Nombre", "Contacto", "Ubicación de Envío")
    FORM_FIELDS = (
        FormField("name", "Nombre", placeholder="Nombre del cliente", required=True),
        FormField("contact", "Contacto", placeholder="Teléfono o email", required=True),
        FormField(
            "shipping_location",
            "Ubicación de Envío",
            placeholder="Ciudad, dirección",
            required=True,
        ),
    )

    SEARCH_FIELDS = ("name", "contact")
    SEARCH_PLACEHOLDER = "Nombre o contacto..."
    CATEGORY_FIELD = "shipping_location"

    SHEET_COLUMNS = spreadsheet.CLIENT_COLUMNS
    SHEET_NAME = "Clientes"
    EXPORT_PREFIX = "clientes"

    CLEAR_BUTTON = "Vaciar Clientes"
    CLEAR_TITLE = "¿Vaciar Lista de Clientes?"
    CLEAR_CAPTION = (
        "Esta acción eliminará todos los clientes de la lista. No se puede deshacer."
    )
    CLEARED_TEXT = "Lista de clientes vaciada"
    EXPORTED_TEXT = "Clientes exportados"

    def row_cells(self, entity: Client) -> Tuple[Any, ...]:
        return (entity.name, entity.contact, entity.shipping_location)

    def detail_rows(self, entity: Client) -> List[Tuple[str, str]]:
        return [
            ("Nombre", entity.name),
            ("Contacto", entity.contact),
            ("Ubicación de Envío", entity.shipping_location),
            ("Fecha de Registro", entity.created_at.strftime("%d/%m/%Y %H:%M")),
            ("Última Actualización", entity.updated_at.strftime("%d/%m/%Y %H:%M")),
        ]
