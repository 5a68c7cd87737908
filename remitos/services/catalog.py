from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from remitos.config import Settings
from remitos.constants import CATEGORY_ALT_HEADER
from remitos.errors import CatalogUnavailable
from remitos.services.sheets import get_sheets_client, read_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    producto: str
    precio: float
    categoria: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_price(raw: Any) -> float:
    """Sheet cell -> price. Anything that is not a finite non-negative number is 0."""
    try:
        v = float(str(raw).strip())
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(v) or math.isinf(v) or v < 0:
        return 0.0
    return v


def _header_map(header_row: Sequence[Any]) -> Dict[str, int]:
    # later duplicates win, same as filling a dict left to right
    return {str(h).lower().strip(): i for i, h in enumerate(header_row)}


def _row_record(headers: Dict[str, int], row: Sequence[Any]) -> Dict[str, str]:
    rec = {}
    for key, i in headers.items():
        rec[key] = str(row[i]) if i < len(row) and row[i] is not None else ""
    return rec


def parse_catalog(rows: Sequence[Sequence[Any]]) -> List[CatalogEntry]:
    """
    rows[0] is the header (ID, Producto, Precio, Categoría in any order/case).
    Every other row becomes a CatalogEntry.
    """
    if not rows:
        return []

    headers = _header_map(rows[0])
    items: List[CatalogEntry] = []
    for row in rows[1:]:
        rec = _row_record(headers, row)
        items.append(
            CatalogEntry(
                id=rec.get("id") or "",
                producto=rec.get("producto") or "",
                precio=parse_price(rec.get("precio", "")),
                categoria=rec.get("categoria") or rec.get(CATEGORY_ALT_HEADER) or "",
            )
        )
    return items


def fetch_catalog(
    settings: Settings,
    client_factory: Optional[Callable[[dict], Any]] = None,
) -> List[CatalogEntry]:
    """
    Re-authenticates and re-reads the sheet on every call.
    Raises CatalogUnavailable on any upstream problem (details go to the log only).
    """
    factory = client_factory or get_sheets_client
    try:
        client = factory(settings.credentials_info)
        rows = read_range(client, settings.spreadsheet_id, settings.sheet_range)
    except Exception as e:
        logger.exception("Error leyendo Google Sheets (%s)", settings.sheet_range)
        raise CatalogUnavailable(str(e)) from e

    items = parse_catalog(rows)
    logger.info("catalog fetched: %d items", len(items))
    return items
