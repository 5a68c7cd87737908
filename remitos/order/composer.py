from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from remitos.constants import (
    MSG_BUSY,
    MSG_COUNTER_ERROR,
    MSG_EMPTY_CART,
    MSG_EMPTY_CART_SHARE,
    MSG_NO_PRODUCT,
    MSG_NOT_GENERATED,
    PREVIEW_NO_NUMBER,
)
from remitos.errors import CommitInProgress, CounterError, InputError, RenderError
from remitos.order.cart import Cart, CartLine
from remitos.order.counter import Counter
from remitos.order.document import DocumentModel, OrderForm, build_document
from remitos.order.share import build_share_uri
from remitos.services.catalog import CatalogEntry
from remitos.utils.formatters import remito_number, safe_filename_part
from remitos.utils.validators import parse_quantity, require_positive_number

logger = logging.getLogger(__name__)

Renderer = Callable[[DocumentModel], Any]
Assembler = Callable[[Any], bytes]


class ComposerState(enum.Enum):
    PREVIEWING = "previewing"
    RENDERING = "rendering"
    COMMITTED = "committed"


@dataclass(frozen=True)
class CommittedDocument:
    number: str
    pdf: bytes
    customer_name: str

    @property
    def filename(self) -> str:
        return f"remito_{self.number}_{safe_filename_part(self.customer_name)}.pdf"


class OrderComposer:
    """
    One order in flight.

    Commands: add_line, remove_line, update_form, commit, download, share.
    The counter only moves inside commit(); everything else reads it with peek().
    """

    def __init__(
        self,
        counter: Counter,
        render: Renderer,
        assemble: Assembler,
        company_lines: Sequence[str] = (),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.counter = counter
        self._render = render
        self._assemble = assemble
        self.company_lines = tuple(company_lines)
        self._clock = clock

        self.cart = Cart()
        self.form = OrderForm()
        self.catalog: List[CatalogEntry] = []
        self._prices: Dict[str, float] = {}
        self.state = ComposerState.PREVIEWING
        self.committed: Optional[CommittedDocument] = None

    # ---------------- catalog ----------------

    def load_catalog(self, entries: Iterable[CatalogEntry]) -> None:
        self.catalog = list(entries)
        self._prices = {}
        for e in self.catalog:
            # first row wins when the sheet repeats a product
            self._prices.setdefault(e.producto, e.precio)

    def price_of(self, producto: str) -> float:
        return self._prices.get(producto, 0.0)

    # ---------------- cart ----------------

    def add_line(self, producto: Optional[str], cantidad: Any = None) -> CartLine:
        producto = (producto or "").strip()
        if not producto:
            raise InputError(MSG_NO_PRODUCT)

        qty = parse_quantity(cantidad)
        try:
            require_positive_number(qty, "cantidad")
        except ValueError as e:
            raise InputError(str(e)) from e

        return self.cart.add(producto, qty, self.price_of(producto))

    def remove_line(self, index: Any) -> bool:
        try:
            i = int(index)
        except (TypeError, ValueError):
            return False
        return self.cart.remove(i)

    def update_form(self, **fields: Optional[str]) -> None:
        for name, value in fields.items():
            if value is None:
                continue
            if not hasattr(self.form, name):
                raise AttributeError(name)
            setattr(self.form, name, value)

    @property
    def total(self) -> float:
        return self.cart.total

    # ---------------- preview ----------------

    @property
    def busy(self) -> bool:
        return self.state is ComposerState.RENDERING

    def preview_number(self) -> str:
        try:
            return remito_number(self.counter.peek())
        except Exception:
            logger.warning("counter %s unreadable, preview shows no number", self.counter.key, exc_info=True)
            return PREVIEW_NO_NUMBER

    def preview(self) -> DocumentModel:
        return build_document(
            self.cart, self.form, self.preview_number(), self._clock(), self.company_lines
        )

    # ---------------- commit ----------------

    async def commit(self) -> CommittedDocument:
        if self.busy:
            raise CommitInProgress(MSG_BUSY)
        if self.cart.is_empty:
            raise InputError(MSG_EMPTY_CART)

        previous = self.state
        self.state = ComposerState.RENDERING
        try:
            try:
                number = remito_number(self.counter.take_next())
            except CounterError:
                raise
            except Exception as e:
                logger.error("counter %s could not be advanced", self.counter.key, exc_info=True)
                raise CounterError(MSG_COUNTER_ERROR) from e

            doc = build_document(self.cart, self.form, number, self._clock(), self.company_lines)
            customer = self.form.customer_name
            try:
                image = await asyncio.to_thread(self._render, doc)
                pdf = await asyncio.to_thread(self._assemble, image)
            except Exception as e:
                logger.warning("remito %s not generated, number is skipped", number, exc_info=True)
                raise RenderError(f"Error generando PDF: {e}") from e
        except BaseException:
            self.state = previous
            raise

        self.committed = CommittedDocument(number=number, pdf=pdf, customer_name=customer)
        self.state = ComposerState.COMMITTED
        logger.info("remito %s generated (%d items, total %.2f)", number, len(doc.lines), doc.total)
        return self.committed

    # ---------------- outputs ----------------

    def download(self) -> Tuple[str, bytes]:
        if self.committed is None:
            raise InputError(MSG_NOT_GENERATED)
        return self.committed.filename, self.committed.pdf

    def share(self) -> str:
        if self.cart.is_empty:
            raise InputError(MSG_EMPTY_CART_SHARE)
        if self.committed is None:
            raise InputError(MSG_NOT_GENERATED)
        return build_share_uri(self.form, self.cart, self.committed.number)
