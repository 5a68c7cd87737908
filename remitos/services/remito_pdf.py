from __future__ import annotations

import io
from dataclasses import dataclass
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from remitos.order.document import DocumentModel, line_label
from remitos.utils.formatters import money

SCALE = 2
WIDTH = 420  # css px of the on-screen preview
PADDING = 16
FONT_SIZE = 12
LINE_GAP = 6

PAGE_MARGIN_X = 30
PAGE_MARGIN_TOP = 40


@dataclass(frozen=True)
class RasterImage:
    png: bytes
    width: int
    height: int


def _font(size: int, bold: bool = False):
    # DejaVu ships with most linux images; Pillow's own font otherwise
    name = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
    try:
        return ImageFont.truetype(name, size)
    except (OSError, ImportError):
        return ImageFont.load_default(size=size)


def _rows(doc: DocumentModel) -> List[Tuple[str, str, bool]]:
    """(left, right, bold) rows top to bottom; '' left + '---' right draws a rule."""
    rows: List[Tuple[str, str, bool]] = []
    for i, text in enumerate(doc.company_lines):
        rows.append((text, "", i == 0))
    rows += [
        ("", "", False),
        ("REMITO X", "", True),
        ("No válido como factura", "", False),
        (f"Remito Nº {doc.number} - Fecha: {doc.date}", "", False),
        ("", "---", False),
        (f"Cliente: {doc.customer_name}", "", True),
        (doc.phone, "", False),
        (f"Dirección de entrega: {doc.address}", "", False),
        ("", "---", False),
    ]
    if doc.lines:
        rows += [(line_label(l), money(l.subtotal), False) for l in doc.lines]
    else:
        rows.append(("No hay productos.", "", False))
    rows += [
        ("Total", money(doc.total), True),
        ("", "---", False),
        (f"Nota: {doc.notes}", "", False),
        ("", "", False),
        ("", "", False),
        ("______________________________________", "", False),
        ("Firma del receptor / Aclaración / DNI", "", False),
    ]
    return rows


def render_document(doc: DocumentModel) -> RasterImage:
    """Snapshot of the remito preview as a PNG, SCALE times the on-screen size."""
    regular = _font(FONT_SIZE * SCALE)
    bold = _font(FONT_SIZE * SCALE, bold=True)
    step = (FONT_SIZE + LINE_GAP) * SCALE
    rows = _rows(doc)

    width = WIDTH * SCALE
    height = PADDING * 2 * SCALE + step * len(rows)
    img = Image.new("RGB", (width, height), (255, 255, 255))
    draw = ImageDraw.Draw(img)

    left = PADDING * SCALE
    right = width - PADDING * SCALE
    y = PADDING * SCALE
    for text, amount, is_bold in rows:
        font = bold if is_bold else regular
        if amount == "---":
            mid = y + step // 2
            draw.line((left, mid, right, mid), fill=(200, 200, 200), width=SCALE)
        else:
            if text:
                draw.text((left, y), text, fill=(0, 0, 0), font=font)
            if amount:
                x = right - draw.textlength(amount, font=font)
                draw.text((x, y), amount, fill=(0, 0, 0), font=font)
        y += step

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return RasterImage(png=buf.getvalue(), width=width, height=height)


def assemble_pdf(image: RasterImage) -> bytes:
    """One A4 page with the snapshot scaled to the page width minus margins."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    w, h = A4

    img_w = w - PAGE_MARGIN_X * 2
    img_h = image.height * img_w / image.width
    c.drawImage(
        ImageReader(io.BytesIO(image.png)),
        PAGE_MARGIN_X,
        h - PAGE_MARGIN_TOP - img_h,
        width=img_w,
        height=img_h,
    )
    c.showPage()
    c.save()
    return buf.getvalue()
