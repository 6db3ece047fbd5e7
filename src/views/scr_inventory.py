from typing import Any, List, Tuple

from db.models import Product
from utils import spreadsheet
from utils.currency import format_boliviano
from views.entity_screen import EntityScreen
from views.modal_entity_form import FormField


class InventoryScreen(EntityScreen):
    """
    Products: search by name, filter by location and quantity range.
    """

    COLLECTION = "products"
    ENTITY_NAME = "Producto"
    ENTITY_PLURAL = "productos"
    TABLE_COLUMNS = ("Nombre", "Ubicación", "Cantidad", "Costo", "Precio Venta")
    FORM_FIELDS = (
        FormField("name", "Nombre", placeholder="Nombre del producto", required=True),
        FormField("location", "Ubicación", placeholder="Oruro", required=True),
        FormField("quantity", "Cantidad", kind="integer"),
        FormField("cost", "Costo (Bs.)", kind="number"),
        FormField("sale_price", "Precio Venta (Bs.)", kind="number"),
    )

    SEARCH_PLACEHOLDER = "Nombre del producto..."
    CATEGORY_FIELD = "location"
    RANGE_FIELD = "quantity"
    RANGE_LABELS = ("Cantidad mínima", "Cantidad máxima")

    SHEET_COLUMNS = spreadsheet.PRODUCT_COLUMNS
    SHEET_NAME = "Inventario"
    EXPORT_PREFIX = "inventario"
    TEMPLATE_NAME = "formato_productos.xlsx"
    TEMPLATE_SHEET = "Productos"

    CLEAR_BUTTON = "Vaciar Inventario"
    CLEAR_TITLE = "Vaciar Inventario"
    CLEAR_CAPTION = (
        "¿Estás seguro de vaciar todo el inventario? Esta acción eliminará "
        "todos los productos y no se puede deshacer."
    )
    CLEARED_TEXT = "Inventario vaciado"
    EXPORTED_TEXT = "Inventario exportado"

    def row_cells(self, entity: Product) -> Tuple[Any, ...]:
        return (
            entity.name,
            entity.location,
            entity.quantity,
            format_boliviano(entity.cost),
            format_boliviano(entity.sale_price),
        )

    def detail_rows(self, entity: Product) -> List[Tuple[str, str]]:
        return [
            ("Nombre", entity.name),
            ("Ubicación", entity.location),
            ("Cantidad", str(entity.quantity)),
            ("Costo", format_boliviano(entity.cost)),
            ("Precio Venta", format_boliviano(entity.sale_price)),
            ("Margen", format_boliviano(entity.sale_price - entity.cost)),
            ("Fecha de Creación", entity.created_at.strftime("%d/%m/%Y %H:%M")),
            ("Última Actualización", entity.updated_at.strftime("%d/%m/%Y %H:%M")),
        ]
