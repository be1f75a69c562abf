# tests/test_routes.py

import io
import json
from datetime import date

import openpyxl
import pytest

from commission_report import create_app, store
from commission_report.calculator.schema import MONTH_NAMES
from commission_report.main.routes import SESSION_KEY
from config import Config


def upload(client, content, filename='ventas.xlsx'):
    return client.post(
        '/',
        data={'file': (io.BytesIO(content), filename)},
        content_type='multipart/form-data',
        follow_redirects=True
    )


def report_session_of(client):
    with client.session_transaction() as sess:
        return store.get(sess.get(SESSION_KEY))


def delete(client, index, row_id=None, confirm=True):
    if row_id is None:
        row_id = report_session_of(client).rows[index].row_id
    data = {'row_id': row_id}
    if confirm:
        data['confirm'] = 'y'
    return client.post(f'/row/{index}/delete', data=data, follow_redirects=True)


@pytest.fixture
def loaded_client(client, sample_xlsx):
    upload(client, sample_xlsx)
    return client


def test_index_without_data(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'Leer Excel' in response.data


def test_upload_shows_derived_table(client, sample_xlsx):
    response = upload(client, sample_xlsx)

    assert response.status_code == 200
    assert 'Se leyeron 3 filas'.encode() in response.data
    assert b'Widget' in response.data
    assert b'1.50%' in response.data
    assert b'75,00' in response.data

    report_session = report_session_of(client)
    assert report_session.sheet_name == 'Ventas'
    assert report_session.source_filename == 'ventas.xlsx'
    assert [row.sequence for row in report_session.rows] == [1, 2, 3]


def test_upload_rejects_other_file_types(client):
    response = upload(client, b'a,b\n1,2\n', filename='notas.csv')

    assert 'archivo Excel válido'.encode() in response.data
    assert report_session_of(client) is None


def test_upload_reports_decode_failure(loaded_client):
    response = upload(loaded_client, b'not a workbook', filename='roto.xlsx')

    assert 'Error al leer el archivo'.encode() in response.data
    # the previous table is kept
    assert len(report_session_of(loaded_client).rows) == 3


def test_upload_empty_sheet(client, empty_xlsx):
    response = upload(client, empty_xlsx)

    assert 'no contiene filas'.encode() in response.data
    assert report_session_of(client).rows == []


def test_delete_row_requires_confirmation(loaded_client):
    response = delete(loaded_client, 0, confirm=False)

    assert 'confirma la eliminación'.encode() in response.data
    assert len(report_session_of(loaded_client).rows) == 3


def test_delete_row_with_confirmation(loaded_client):
    delete(loaded_client, 0)

    rows = report_session_of(loaded_client).rows
    assert [row.sequence for row in rows] == [1, 2]
    assert rows[0]['CodArt'] == 'B2'


def test_delete_row_out_of_range(loaded_client):
    response = delete(loaded_client, 7, row_id='missing')

    assert 'No se pudo eliminar la fila'.encode() in response.data
    assert len(report_session_of(loaded_client).rows) == 3


def test_delete_row_requires_row_id(loaded_client):
    response = loaded_client.post('/row/0/delete', data={'confirm': 'y'}, follow_redirects=True)

    assert 'La fila no se eliminó'.encode() in response.data
    assert len(report_session_of(loaded_client).rows) == 3


def test_delete_row_from_outdated_page_keeps_table(loaded_client):
    first_row_id = report_session_of(loaded_client).rows[0].row_id
    delete(loaded_client, 0, row_id=first_row_id)

    # the same form submitted again now points at what used to be row 2
    response = delete(loaded_client, 0, row_id=first_row_id)

    assert 'La tabla cambió'.encode() in response.data
    rows = report_session_of(loaded_client).rows
    assert [row['CodArt'] for row in rows] == ['B2', 'C3']


def test_table_rows_have_distinct_form_ids(loaded_client):
    response = loaded_client.get('/')
    page = response.data.decode()

    assert 'id="confirm"' not in page
    for row in report_session_of(loaded_client).rows:
        assert f'id="confirm-{row.row_id}"' in page
        assert f'value="{row.row_id}"' in page


def test_export_xlsx(loaded_client):
    response = loaded_client.get('/export/xlsx')

    today = date.today()
    expected_name = f"Ana - {MONTH_NAMES[today.month - 1]} {today.year}.xlsx"
    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert expected_name in response.headers['Content-Disposition']

    ws = openpyxl.load_workbook(io.BytesIO(response.data))['Reporte']
    assert ws.max_row == 5
    assert ws['A5'].value == 'TOTAL'
    assert ws['H5'].value == pytest.approx(75.0)


def test_export_xlsx_after_delete(loaded_client):
    delete(loaded_client, 1)
    response = loaded_client.get('/export/xlsx')

    ws = openpyxl.load_workbook(io.BytesIO(response.data))['Reporte']
    assert ws.max_row == 4
    assert ws['H4'].value == pytest.approx(15.0)


def test_export_json(loaded_client):
    response = loaded_client.get('/export/json')

    assert response.status_code == 200
    assert 'datos-excel-con-calculos.json' in response.headers['Content-Disposition']
    records = json.loads(response.data)
    assert len(records) == 3
    assert 'sequence' not in records[0]
    assert records[1]['% UTIL GANADA'] == 0.03


def test_export_without_data_redirects(client):
    assert client.get('/export/xlsx').status_code == 302
    assert client.get('/export/json').status_code == 302


def test_clear_discards_table(loaded_client):
    report_session = report_session_of(loaded_client)
    loaded_client.post('/clear', data={}, follow_redirects=True)

    assert store.get(report_session.id) is None
    assert loaded_client.get('/export/xlsx').status_code == 302


def test_session_store_stays_within_bound(sample_xlsx):
    class SmallStoreConfig(Config):
        TESTING = True
        WTF_CSRF_ENABLED = False
        SECRET_KEY = 'test-secret-key'
        REPORT_MAX_SESSIONS = 2

    app = create_app(SmallStoreConfig)
    clients = [app.test_client() for _ in range(5)]
    for client in clients:
        upload(client, sample_xlsx)

    assert len(store) == 2
    assert report_session_of(clients[0]) is None
    assert report_session_of(clients[-1]) is not None
