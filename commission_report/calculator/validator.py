# ==============================================================================
# commission_report/calculator/validator.py
# ------------------------------------------------------------------------------
# Decodes the uploaded workbook and hands the first worksheet to the engine
# as a list of raw rows.
# ==============================================================================

import logging
from dataclasses import dataclass, field

import pandas as pd
from .schema import EXPECTED_COLUMNS


@dataclass
class WorksheetData:
    sheet_name: str
    rows: list = field(default_factory=list)


def _frame_to_rows(df):
    """Converts a DataFrame into raw rows, with empty cells as None."""
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient='records')


def load_worksheet(source):
    """
    Reads the first worksheet of an Excel file.

    Args:
        source: A path or a binary file-like object holding an .xlsx/.xls file.

    Returns:
        tuple: A tuple containing:
            - WorksheetData: The sheet name and its raw rows if decoding succeeded.
            - list: A list of human-readable error messages if decoding failed.
    """
    try:
        xls = pd.ExcelFile(source)
        sheet_name = xls.sheet_names[0]
        df = pd.read_excel(xls, sheet_name=sheet_name)
    except Exception as e:
        logging.error(f"Could not decode the uploaded workbook: {e}", exc_info=True)
        return None, [f"Error al leer el archivo. Asegúrate de que es un Excel válido. Detalle técnico: {e}"]

    # Missing columns are not fatal: the engine reads them as 0.
    clean_columns = [str(col).strip() for col in df.columns]
    missing_columns = [col for col in EXPECTED_COLUMNS if col not in clean_columns]
    if missing_columns and len(df.columns) > 0:
        logging.warning(f"Sheet '{sheet_name}' lacks expected columns: {', '.join(missing_columns)}")

    rows = _frame_to_rows(df)
    logging.info(f"Read {len(rows)} rows and {len(df.columns)} columns from sheet '{sheet_name}'.")
    return WorksheetData(sheet_name=str(sheet_name), rows=rows), []
