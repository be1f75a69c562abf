# ==============================================================================
# commission_report/main/routes.py
# ------------------------------------------------------------------------------
# Defines all user-facing routes for the main application blueprint.
# This file acts as the main controller for the web interface: it reads the
# uploaded worksheet, shows the commission table and serves the exports.
# ==============================================================================

import io
import os
from flask import (render_template, request, flash, redirect, url_for,
                   current_app, session, send_file, Response)
from werkzeug.utils import secure_filename

from commission_report import store
from commission_report.main import bp
from commission_report.calculator.engine import RowIndexError, StaleRowError
from commission_report.calculator.validator import load_worksheet
from commission_report.calculator.report import write_workbook
from commission_report.calculator.schema import (ADJUSTED_AMOUNT_COLUMN, EARNED_AMOUNT_COLUMN,
                                                 JSON_EXPORT_FILENAME)
from commission_report.main.forms import UploadForm, DeleteRowForm, ClearForm

SESSION_KEY = 'report_session_id'

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# --- Helper Functions ---

def allowed_file(filename):
    """Checks if the file extension is allowed based on the app config."""
    return '.' in filename and \
           os.path.splitext(filename)[1].lower() in current_app.config['ALLOWED_EXTENSIONS']

def current_report_session(create=False):
    """Returns the ReportSession bound to the browser session, if any."""
    session_id = session.get(SESSION_KEY)
    if not create:
        return store.get(session_id)
    report_session = store.get_or_create(session_id)
    session[SESSION_KEY] = report_session.id
    return report_session

def fallback_agent():
    return current_app.config.get('REPORT_FALLBACK_AGENT') or 'Sin vendedor'

# --- Main Application Routes ---

@bp.route('/', methods=['GET', 'POST'])
def index():
    """Handles the main page with the file uploader and the commission table."""
    form = UploadForm()
    if request.method == 'POST':
        if not form.validate_on_submit():
            for errors in form.errors.values():
                for error in errors:
                    flash(error, 'danger')
            return redirect(request.url)

        file = form.file.data
        filename = secure_filename(file.filename) or file.filename
        if not allowed_file(file.filename):
            flash('Por favor, selecciona un archivo Excel válido (.xlsx, .xls)', 'danger')
            return redirect(request.url)

        worksheet, errors = load_worksheet(io.BytesIO(file.read()))
        if errors:
            for error in errors:
                flash(error, 'danger')
            return redirect(request.url)

        report_session = current_report_session(create=True)
        report_session.load(worksheet, source_filename=filename)
        current_app.logger.info(f"Loaded '{filename}' into {report_session!r}")

        if report_session.is_empty:
            flash('La hoja no contiene filas de datos.', 'warning')
        else:
            flash(f'Se leyeron {len(report_session.rows)} filas de la hoja "{report_session.sheet_label}".', 'success')
        return redirect(url_for('main.index'))

    report_session = current_report_session()
    totals = report_session.totals() if report_session else {}
    file_name = None
    if report_session and not report_session.is_empty:
        file_name = report_session.build_report(fallback_agent=fallback_agent()).file_name

    return render_template(
        'index.html',
        form=form,
        delete_form=DeleteRowForm(),
        clear_form=ClearForm(),
        report_session=report_session,
        total_earned=totals.get(EARNED_AMOUNT_COLUMN, 0),
        total_adjusted=totals.get(ADJUSTED_AMOUNT_COLUMN, 0),
        export_file_name=file_name
    )

@bp.route('/row/<int:index>/delete', methods=['POST'])
def delete_row(index):
    """Deletes one row of the table after explicit confirmation."""
    form = DeleteRowForm()
    if not form.validate_on_submit():
        flash('La fila no se eliminó: confirma la eliminación.', 'warning')
        return redirect(url_for('main.index'))

    report_session = current_report_session()
    if report_session is None or report_session.is_empty:
        flash('No hay datos cargados.', 'warning')
        return redirect(url_for('main.index'))

    try:
        report_session.delete_row(index, row_id=form.row_id.data)
    except StaleRowError as e:
        current_app.logger.warning(f"Rejected row deletion from an outdated page: {e}")
        flash('La tabla cambió desde que se mostró la página. Revisa la fila e inténtalo de nuevo.', 'warning')
        return redirect(url_for('main.index'))
    except RowIndexError as e:
        current_app.logger.warning(f"Rejected row deletion: {e}")
        flash(f'No se pudo eliminar la fila: {e}', 'danger')
        return redirect(url_for('main.index'))

    flash('Fila eliminada.', 'success')
    return redirect(url_for('main.index'))

@bp.route('/clear', methods=['POST'])
def clear():
    """Discards the loaded table."""
    form = ClearForm()
    if form.validate_on_submit():
        report_session = current_report_session()
        if report_session is not None:
            report_session.clear()
            store.discard(report_session.id)
        session.pop(SESSION_KEY, None)
        flash('Datos eliminados.', 'info')
    return redirect(url_for('main.index'))

# --- Export Routes ---

@bp.route('/export/xlsx')
def export_xlsx():
    """Downloads the formatted report with its total row."""
    report_session = current_report_session()
    if report_session is None or report_session.is_empty:
        flash('No hay datos para exportar.', 'warning')
        return redirect(url_for('main.index'))

    report = report_session.build_report(fallback_agent=fallback_agent())
    content = write_workbook(report)
    current_app.logger.info(f"Exporting report '{report.file_name}' ({len(report.data_rows)} rows)")
    return send_file(
        io.BytesIO(content),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f"{report.file_name}.xlsx"
    )

@bp.route('/export/json')
def export_json():
    """Downloads the table, without row numbers, as JSON."""
    report_session = current_report_session()
    if report_session is None or report_session.is_empty:
        flash('No hay datos para exportar.', 'warning')
        return redirect(url_for('main.index'))

    return Response(
        report_session.export_json(),
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename={JSON_EXPORT_FILENAME}'}
    )
