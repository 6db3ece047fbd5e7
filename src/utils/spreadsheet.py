# xlsx interchange for the entity collections
from __future__ import annotations

import unicodedata
import zipfile
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from utils.errors import ImportParseError
from utils.logger import get_logger
from utils.pure import to_float, to_int

_logger = get_logger(__name__)

CREATED_HEADER = "Fecha Creación"


@dataclass(frozen=True)
class Column:
    field: str
    header: str
    aliases: Tuple[str, ...] = ()
    kind: Literal["str", "int", "float"] = "str"

    def coerce(self, value: Any) -> Any:
        if self.kind == "int":
            return to_int(value)
        if self.kind == "float":
            return to_float(value)
        return "" if value is None else str(value).strip()


PRODUCT_COLUMNS = (
    Column("name", "Nombre", ("nombre", "Name")),
    Column("location", "Ubicación", ("ubicacion", "Ubicacion", "Location")),
    Column("quantity", "Cantidad", ("cantidad", "Quantity"), "int"),
    Column("cost", "Costo", ("costo", "Cost"), "float"),
    Column(
        "sale_price",
        "Precio de Venta",
        ("precio_venta", "Precio_Venta", "Precio Venta", "Sale Price", "salePrice"),
        "float",
    ),
)

CLIENT_COLUMNS = (
    Column("name", "Nombre", ("nombre", "Name")),
    Column("contact", "Contacto", ("contacto", "Contact")),
    Column(
        "shipping_location",
        "Ubicación de Envío",
        ("ubicacion_envio", "Ubicacion de Envio", "Shipping Location", "shippingLocation"),
    ),
)


def normalize_header(text: Any) -> str:
    """'  Ubicación_de envío ' -> 'ubicacion de envio'"""
    text = unicodedata.normalize("NFKD", str(text or ""))
    text = "".join(c for c in text if not unicodedata.combining(c))
    return " ".join(text.replace("_", " ").lower().split())


def resolve_columns(
    header_row: Sequence[Any], columns: Sequence[Column]
) -> Dict[str, int]:
    """Map each column's field to the index of the first matching header cell."""
    normalized = [normalize_header(h) for h in header_row]
    resolved: Dict[str, int] = {}
    for col in columns:
        accepted = {normalize_header(a) for a in (col.header, *col.aliases)}
        for idx, header in enumerate(normalized):
            if header in accepted:
                resolved[col.field] = idx
                break
    return resolved


def default_export_name(prefix: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.xlsx"


def export_workbook(
    entities: Iterable[Any],
    columns: Sequence[Column],
    path: Path | str,
    sheet_name: str,
) -> Path:
    """
    Write one sheet: header row, then one row per entity.
    The creation date goes in a trailing column that import ignores.
    """
    path = Path(path)
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append([col.header for col in columns] + [CREATED_HEADER])
    count = 0
    for entity in entities:
        row = [getattr(entity, col.field) for col in columns]
        created: datetime = entity.created_at
        row.append(created.strftime("%d/%m/%Y"))
        ws.append(row)
        # keep text literal, "=Arena" must not become a formula
        for cell, col in zip(ws[ws.max_row], columns):
            if col.kind == "str":
                cell.data_type = "s"
        count += 1
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    _logger.info(f"Exported {count} rows to {path}")
    return path


def write_template(path: Path | str, columns: Sequence[Column], sheet_name: str) -> Path:
    """Blank import template: headers plus one empty example row."""
    path = Path(path)
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append([col.header for col in columns])
    ws.append(["" if col.kind == "str" else 0 for col in columns])
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    _logger.info(f"Template written to {path}")
    return path


def read_records(
    path: Path | str,
    columns: Sequence[Column],
    required: Sequence[str],
) -> List[Dict[str, Any]]:
    """
    Read the first sheet into field dicts.

    Unknown columns are ignored, missing ones take their coerced default,
    and rows with a blank required field are dropped. Raises ImportParseError
    if the file cannot be opened or its first sheet cannot be parsed.
    """
    path = Path(path)
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError) as e:
        _logger.error(f"Could not open workbook {path}: {e}")
        raise ImportParseError(f"Could not read {path.name}") from e
    except Exception as e:
        # damaged xml parts inside a valid zip
        _logger.error(f"Could not parse workbook {path}: {e!r}")
        raise ImportParseError(f"Could not read {path.name}") from e

    try:
        if not wb.worksheets:
            return []
        rows = list(wb.worksheets[0].iter_rows(values_only=True))
    except Exception as e:
        # sheet XML is parsed lazily, so a damaged part only fails here
        _logger.error(f"Could not read first sheet of {path}: {e!r}")
        raise ImportParseError(f"Could not read {path.name}") from e
    finally:
        wb.close()

    if not rows:
        return []

    index = resolve_columns(rows[0], columns)
    _logger.debug(f"Resolved columns for {path.name}: {index}")

    records: List[Dict[str, Any]] = []
    skipped = 0
    for row in rows[1:]:
        record = {}
        for col in columns:
            idx = index.get(col.field)
            value = row[idx] if idx is not None and idx < len(row) else None
            record[col.field] = col.coerce(value)
        if all(record.get(f) for f in required):
            records.append(record)
        else:
            skipped += 1

    if skipped:
        _logger.info(f"Skipped {skipped} incomplete rows in {path.name}")
    return records
