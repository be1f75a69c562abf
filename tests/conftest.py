# tests/conftest.py

import io

import pandas as pd
import pytest

from config import Config


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = 'test-secret-key'
    REPORT_FALLBACK_AGENT = 'Sin vendedor'


@pytest.fixture
def app():
    """Creates a new app instance configured for testing."""
    from commission_report import create_app

    app = create_app(TestingConfig)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def raw_rows():
    """Three worksheet rows as the decoder produces them, headers padded with spaces."""
    return [
        {' CodArt': 'A1', 'Articulo ': 'Widget', 'Cantidad#sumar': 10,
         'TOTAL sin IVA#sumar': 1000, ' UTIL_porc ': 20, 'Vendedor': 'Ana'},
        {' CodArt': 'B2', 'Articulo ': 'Cañería', 'Cantidad#sumar': 5,
         'TOTAL sin IVA#sumar': 2000, ' UTIL_porc ': 50, 'Vendedor': 'Ana'},
        {' CodArt': 'C3', 'Articulo ': 'Cable', 'Cantidad#sumar': None,
         'TOTAL sin IVA#sumar': 500, ' UTIL_porc ': 'N/A', 'Vendedor': 'Ana'},
    ]


@pytest.fixture
def sample_xlsx(raw_rows):
    """The raw rows written to an in-memory .xlsx workbook with a 'Ventas' sheet."""
    buffer = io.BytesIO()
    pd.DataFrame(raw_rows).to_excel(buffer, sheet_name='Ventas', index=False)
    return buffer.getvalue()


@pytest.fixture
def empty_xlsx():
    buffer = io.BytesIO()
    pd.DataFrame(columns=['CodArt', 'Articulo', 'Vendedor']).to_excel(buffer, sheet_name='Vacia', index=False)
    return buffer.getvalue()
