from __future__ import annotations

from urllib.parse import quote

from remitos.constants import EMPTY_FIELD, SHARE_DEFAULT_CUSTOMER, WHATSAPP_URL
from remitos.order.cart import Cart
from remitos.order.document import OrderForm
from remitos.utils.formatters import money, plain_number

# same set encodeURIComponent leaves alone
_URI_SAFE = "-_.!~*'()"


def build_share_message(form: OrderForm, cart: Cart, number: str) -> str:
    lines = [
        "*Nuevo pedido / Remito:*",
        "",
        f"*Cliente:* {form.customer_name or SHARE_DEFAULT_CUSTOMER}",
        f"*Teléfono:* {form.phone or EMPTY_FIELD}",
        f"*Dirección:* {form.address or EMPTY_FIELD}",
        "",
        "*Productos:*",
    ]
    for p in cart:
        lines.append(
            f"- {plain_number(p.cantidad)} × {p.producto} (${plain_number(p.precio)}) = {money(p.subtotal)}"
        )
    lines += [
        "",
        f"*Total:* {money(cart.total)}",
        f"*Nota:* {form.notes}" if form.notes else "",
        "",
        f"Remito Nº: {number}",
        "",
        "Pedido generado desde la web de la distribuidora",
    ]
    return "\n".join(lines)


def build_share_uri(form: OrderForm, cart: Cart, number: str) -> str:
    text = build_share_message(form, cart, number)
    return f"{WHATSAPP_URL}?text={quote(text, safe=_URI_SAFE)}"
