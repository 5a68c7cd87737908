from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote, urlencode

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from remitos.config import Settings, load_settings
from remitos.constants import MSG_CATALOG_ERROR, MSG_COUNTER_ERROR, MSG_GENERATED
from remitos.db.sqlite import SqliteCounterStore
from remitos.errors import CatalogUnavailable, CounterError, InputError, RenderError
from remitos.order.composer import OrderComposer
from remitos.order.counter import Counter
from remitos.order.document import line_label, render_preview_text
from remitos.services.catalog import fetch_catalog
from remitos.services.remito_pdf import assemble_pdf, render_document
from remitos.utils.formatters import money, plain_number

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

app = FastAPI(title="Remitos")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = money
templates.env.filters["plain_number"] = plain_number

if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


# One composer for the whole process, shared by every browser that opens /pedidos.
# Assumes a single clerk; two people editing at once would share one cart.
def build_composer(settings: Settings) -> OrderComposer:
    counter = Counter(SqliteCounterStore(settings.db_path))
    return OrderComposer(
        counter,
        render=render_document,
        assemble=assemble_pdf,
        company_lines=settings.company_lines,
    )


@app.on_event("startup")
def _startup() -> None:
    # ConfigError here aborts startup: no serving without credentials
    settings = load_settings()
    app.state.settings = settings
    app.state.composer = build_composer(settings)
    logger.info("GET /api/catalogo -> catálogo desde Google Sheets (%s)", settings.sheet_range)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_composer(request: Request) -> OrderComposer:
    return request.app.state.composer


def _back(msg: str = "") -> RedirectResponse:
    url = "/pedidos"
    if msg:
        url += "?" + urlencode({"msg": msg})
    return RedirectResponse(url=url, status_code=303)


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _render(request: Request, name: str, ctx: dict[str, Any]) -> HTMLResponse:
    base = {"request": request}
    base.update(ctx)
    return templates.TemplateResponse(request, name, base)


# ---------------- catalog ----------------

@app.get("/api/catalogo")
def catalogo(settings: Settings = Depends(get_settings)):
    try:
        items = fetch_catalog(settings)
    except CatalogUnavailable:
        return JSONResponse(status_code=500, content={"error": MSG_CATALOG_ERROR})
    return [e.to_dict() for e in items]


@app.get("/test", response_class=PlainTextResponse)
def test_route():
    return "Remitos sirve correctamente rutas simples"


# ---------------- order page ----------------

@app.get("/")
def index():
    return RedirectResponse(url="/pedidos", status_code=303)


@app.get("/pedidos", response_class=HTMLResponse)
def pedidos(
    request: Request,
    msg: str = "",
    recargar: bool = False,
    settings: Settings = Depends(get_settings),
    composer: OrderComposer = Depends(get_composer),
):
    catalog_error = False
    if recargar or not composer.catalog:
        try:
            composer.load_catalog(fetch_catalog(settings))
        except CatalogUnavailable:
            catalog_error = True

    doc = composer.preview()
    can_export = composer.committed is not None and not composer.cart.is_empty
    return _render(
        request,
        "pedidos.html",
        {
            "message": msg,
            "catalog": composer.catalog,
            "catalog_error": catalog_error,
            "form": composer.form,
            "lines": [(i, line_label(l), l.subtotal) for i, l in enumerate(composer.cart)],
            "doc": doc,
            "preview_text": render_preview_text(doc),
            "busy": composer.busy,
            "can_export": can_export,
            "committed": composer.committed,
        },
    )


@app.post("/pedidos/cliente")
def pedidos_cliente(
    customer_name: str = Form(""),
    phone: str = Form(""),
    address: str = Form(""),
    notes: str = Form(""),
    composer: OrderComposer = Depends(get_composer),
):
    composer.update_form(customer_name=customer_name, phone=phone, address=address, notes=notes)
    return _back()


@app.post("/pedidos/agregar")
def pedidos_agregar(
    producto: str = Form(""),
    cantidad: str = Form(""),
    composer: OrderComposer = Depends(get_composer),
):
    try:
        composer.add_line(producto, cantidad)
    except InputError as e:
        return _back(str(e))
    return _back()


@app.post("/pedidos/quitar")
def pedidos_quitar(
    index: str = Form(""),
    composer: OrderComposer = Depends(get_composer),
):
    composer.remove_line(index)
    return _back()


@app.post("/pedidos/generar")
async def pedidos_generar(composer: OrderComposer = Depends(get_composer)):
    try:
        doc = await composer.commit()
    except (InputError, RenderError) as e:
        return _back(str(e))
    except CounterError:
        return _back(MSG_COUNTER_ERROR)
    return _back(f"{MSG_GENERATED} Remito Nº {doc.number}")


@app.get("/pedidos/descargar")
def pedidos_descargar(composer: OrderComposer = Depends(get_composer)):
    try:
        filename, pdf = composer.download()
    except InputError as e:
        return _back(str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(filename)},
    )


@app.get("/pedidos/whatsapp")
def pedidos_whatsapp(composer: OrderComposer = Depends(get_composer)):
    try:
        uri = composer.share()
    except InputError as e:
        return _back(str(e))
    return RedirectResponse(url=uri, status_code=303)
