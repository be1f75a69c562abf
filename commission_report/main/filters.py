# ==============================================================================
# commission_report/main/filters.py
# ------------------------------------------------------------------------------
# Defines custom Jinja2 template filters for the application.
# ==============================================================================

from commission_report.main import bp
from commission_report.calculator.cells import format_for_display, is_numeric

@bp.app_template_filter('format_cell')
def format_cell_filter(value):
    """
    Formats a table cell for display.
    Example: 0.015 -> "1.50%", 1500 -> "1.500,00", None -> "-"
    """
    return format_for_display(value)

@bp.app_template_test('numeric')
def numeric_test(value):
    """Used by the table to right-align numeric cells."""
    return is_numeric(value)
