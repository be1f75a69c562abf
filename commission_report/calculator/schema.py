# ==============================================================================
# commission_report/calculator/schema.py
# ------------------------------------------------------------------------------
# Defines the columns the commission worksheet is expected to carry and the
# columns the pipeline adds. This schema is the single source of truth for
# the engine, the validator and the report exporter.
# ==============================================================================

# --- Source columns (canonical, i.e. trimmed, header names) ---
ITEM_CODE_COLUMN = 'CodArt'
ITEM_NAME_COLUMN = 'Articulo'
QUANTITY_COLUMN = 'Cantidad#sumar'
TOTAL_BEFORE_TAX_COLUMN = 'TOTAL sin IVA#sumar'
UTIL_PERCENT_COLUMN = 'UTIL_porc'
AGENT_COLUMN = 'Vendedor'

# --- Derived columns ---
EARNED_RATE_COLUMN = '% UTIL GANADA'
EARNED_AMOUNT_COLUMN = 'MONTO GANADO'
ADJUSTED_AMOUNT_COLUMN = 'COLUMNA 3'

DERIVED_COLUMNS = (EARNED_RATE_COLUMN, EARNED_AMOUNT_COLUMN, ADJUSTED_AMOUNT_COLUMN)

# MONTO GANADO is always divided by this constant to obtain COLUMNA 3.
ADJUSTMENT_DIVISOR = 1.5

# Ordered list of columns shown on screen and exported.
DISPLAY_COLUMNS = [
    ITEM_CODE_COLUMN,
    ITEM_NAME_COLUMN,
    QUANTITY_COLUMN,
    TOTAL_BEFORE_TAX_COLUMN,
    UTIL_PERCENT_COLUMN,
    AGENT_COLUMN,
    EARNED_RATE_COLUMN,
    EARNED_AMOUNT_COLUMN,
    ADJUSTED_AMOUNT_COLUMN,
]

# Columns the derivation reads. Missing ones are tolerated (read as 0) but logged.
EXPECTED_COLUMNS = [UTIL_PERCENT_COLUMN, TOTAL_BEFORE_TAX_COLUMN, AGENT_COLUMN]

# --- Report export ---
EXPORT_SHEET_NAME = 'Reporte'
TOTAL_LABEL = 'TOTAL'

# Header checked by the total row for the adjusted-amount sum. It does not
# match ADJUSTED_AMOUNT_COLUMN, so that total cell stays blank in exports.
ADJUSTED_TOTAL_HEADER = 'COLUMNA TRES'

HEADER_WIDTH_PADDING = 4
DEFAULT_MIN_WIDTH = 15
COLUMN_MIN_WIDTHS = {
    ITEM_NAME_COLUMN: 40,
    AGENT_COLUMN: 30,
}

FALLBACK_AGENT_NAME = 'Sin vendedor'
JSON_EXPORT_FILENAME = 'datos-excel-con-calculos.json'

MONTH_NAMES = (
    'enero', 'febrero', 'marzo', 'abril', 'mayo', 'junio',
    'julio', 'agosto', 'septiembre', 'octubre', 'noviembre', 'diciembre',
)
