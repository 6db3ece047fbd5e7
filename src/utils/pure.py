from dataclasses import dataclass
from math import ceil
from typing import Any, Iterable, List, Literal, Optional, Sequence

from utils.currency import parse_boliviano

PAGE_SIZE_OPTIONS = (5, 10, 50, 100)
DEFAULT_PAGE_SIZE = PAGE_SIZE_OPTIONS[0]
LOW_STOCK_THRESHOLD = 10


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    # If no headers, take the first row as header and remove it from rows
    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = list(map(str, headers))
    rows = [list(map(str, row)) for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def to_int(val) -> int:
    """Coerce to int the way the forms and sheets expect; junk becomes 0."""
    if isinstance(val, bool):
        return int(val)
    try:
        return int(val)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(str(val).strip().replace(",", ".")))
    except (TypeError, ValueError, OverflowError):
        return 0


def to_float(val) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        pass
    if val is None:
        return 0.0
    # "3,5" or "Bs. 1.500,50"
    return parse_boliviano(str(val))


# ---------------------------
# Filtering
# ---------------------------


def parse_bound(text: Optional[str]) -> Optional[int]:
    """Blank or non-integer input means the bound is not set."""
    text = (text or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def matches_search(entity: Any, term: str, fields: Sequence[str]) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    return any(term in str(getattr(entity, f, "")).lower() for f in fields)


def filter_entities(
    entities: Iterable[Any],
    search: str = "",
    search_fields: Sequence[str] = ("name",),
    category_field: Optional[str] = None,
    category: str = "",
    range_field: Optional[str] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> List[Any]:
    """
    AND of every active filter, keeping the input order:
      - search: case-insensitive substring over search_fields
      - category: exact match on category_field
      - range: min_value <= range_field <= max_value, None bounds are open
    """
    result = []
    for entity in entities:
        if not matches_search(entity, search, search_fields):
            continue
        if category_field and category and getattr(entity, category_field) != category:
            continue
        if range_field:
            value = getattr(entity, range_field)
            if min_value is not None and value < min_value:
                continue
            if max_value is not None and value > max_value:
                continue
        result.append(entity)
    return result


# ---------------------------
# Pagination
# ---------------------------


@dataclass(frozen=True)
class Page:
    items: List[Any]
    page: int
    page_size: int
    total: int

    @property
    def page_count(self) -> int:
        return page_count(self.total, self.page_size)

    @property
    def start(self) -> int:
        """1-based index of the first row shown, 0 when there is nothing."""
        if not self.total:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end(self) -> int:
        return min(self.page * self.page_size, self.total)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count


def page_count(total: int, page_size: int) -> int:
    return max(ceil(total / page_size), 1)


def paginate(items: Sequence[Any], page: int, page_size: int) -> Page:
    if page_size < 1:
        raise ValueError("page_size must be positive")
    page = max(1, min(page, page_count(len(items), page_size)))
    offset = (page - 1) * page_size
    return Page(
        items=list(items[offset : offset + page_size]),
        page=page,
        page_size=page_size,
        total=len(items),
    )


# ---------------------------
# Dashboard
# ---------------------------


def inventory_summary(products: Sequence[Any], clients: Sequence[Any]) -> dict:
    return {
        "total_products": len(products),
        "total_units": sum(p.quantity for p in products),
        "cost_value": sum(p.quantity * p.cost for p in products),
        "sale_value": sum(p.quantity * p.sale_price for p in products),
        "low_stock_products": sum(
            1 for p in products if p.quantity < LOW_STOCK_THRESHOLD
        ),
        "total_clients": len(clients),
    }
