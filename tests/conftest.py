from datetime import datetime

import pytest

from remitos.config import Settings
from remitos.order.composer import OrderComposer
from remitos.order.counter import Counter, MemoryCounterStore
from remitos.services.catalog import CatalogEntry

FIXED_NOW = datetime(2026, 10, 19, 10, 30)

CATALOG = [
    CatalogEntry(id="1", producto="Agua", precio=100.0, categoria="Bebidas"),
    CatalogEntry(id="2", producto="Yerba 1kg", precio=2500.5, categoria="Almacén"),
    CatalogEntry(id="3", producto="Galletitas", precio=0.0, categoria=""),
]


class FakeSheets:
    """Mimics the googleapiclient chain: spreadsheets().values().get(...).execute()"""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {}
        self.error = error
        self.calls = []

    def spreadsheets(self):
        return self

    def values(self):
        return self

    def get(self, spreadsheetId, range):
        self.calls.append((spreadsheetId, range))
        return self

    def execute(self):
        if self.error:
            raise self.error
        return self.response


def fake_render(doc):
    return f"IMG:{doc.number}"


def fake_assemble(image):
    return f"%PDF-fake {image}".encode()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        spreadsheet_id="sheet-123",
        sheet_range="Hoja1!A:D",
        credentials_info={"type": "service_account"},
        db_path=str(tmp_path / "remitos.db"),
    )


@pytest.fixture
def store():
    return MemoryCounterStore()


@pytest.fixture
def counter(store):
    return Counter(store)


@pytest.fixture
def make_composer(counter):
    def _make(render=fake_render, assemble=fake_assemble, counter=counter):
        c = OrderComposer(
            counter,
            render=render,
            assemble=assemble,
            company_lines=["Distribuidora Malvinas", "CUIT: XX-XXXXXXXX-X"],
            clock=lambda: FIXED_NOW,
        )
        c.load_catalog(CATALOG)
        return c

    return _make


@pytest.fixture
def composer(make_composer):
    return make_composer()
