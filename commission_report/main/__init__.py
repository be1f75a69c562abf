from flask import Blueprint
from datetime import date

bp = Blueprint('main', __name__)

# Makes today's date available in all templates
@bp.app_context_processor
def inject_today():
    return {'today': date.today()}

# Import routes, filters, and forms at the bottom
from commission_report.main import routes, filters, forms
