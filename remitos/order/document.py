from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from remitos.constants import DEFAULT_CUSTOMER, EMPTY_FIELD
from remitos.order.cart import Cart, CartLine
from remitos.utils.formatters import money, plain_number, short_date


@dataclass
class OrderForm:
    customer_name: str = ""
    phone: str = ""
    address: str = ""
    notes: str = ""


@dataclass(frozen=True)
class DocumentModel:
    number: str
    date: str
    customer_name: str
    phone: str
    address: str
    notes: str
    lines: List[CartLine] = field(default_factory=list)
    total: float = 0.0
    company_lines: Sequence[str] = ()


def build_document(
    cart: Cart,
    form: OrderForm,
    number: str,
    when: Optional[datetime] = None,
    company_lines: Sequence[str] = (),
) -> DocumentModel:
    # copies, so a later cart edit does not leak into a remito being rendered
    lines = [CartLine(l.producto, l.cantidad, l.precio) for l in cart]
    return DocumentModel(
        number=number,
        date=short_date(when or datetime.now()),
        customer_name=form.customer_name.strip() or DEFAULT_CUSTOMER,
        phone=form.phone.strip() or EMPTY_FIELD,
        address=form.address.strip() or EMPTY_FIELD,
        notes=form.notes.strip() or EMPTY_FIELD,
        lines=lines,
        total=sum(l.subtotal for l in lines),
        company_lines=tuple(company_lines),
    )


def line_label(line: CartLine) -> str:
    return f"{plain_number(line.cantidad)} × {line.producto}"


def render_preview_text(doc: DocumentModel) -> str:
    out: List[str] = list(doc.company_lines)
    out += [
        "",
        "REMITO X",
        "No válido como factura",
        f"Remito Nº {doc.number} - Fecha: {doc.date}",
        "",
        f"Cliente: {doc.customer_name}",
        doc.phone,
        f"Dirección de entrega: {doc.address}",
        "",
    ]
    if doc.lines:
        out += [f"{line_label(l)}  {money(l.subtotal)}" for l in doc.lines]
    else:
        out.append("No hay productos.")
    out += [
        f"Total  {money(doc.total)}",
        "",
        f"Nota: {doc.notes}",
    ]
    return "\n".join(out)
