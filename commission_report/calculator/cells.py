# ==============================================================================
# commission_report/calculator/cells.py
# ------------------------------------------------------------------------------
# Worksheet cells can hold text, numbers, dates or nothing at all. This module
# classifies a raw cell once and defines the numeric coercion and the
# on-screen formatting over that classification.
# ==============================================================================

import math
import numbers
from dataclasses import dataclass
from datetime import date
from enum import Enum

import pandas as pd


class CellKind(Enum):
    NUMBER = 'number'
    TEXT = 'text'
    DATE = 'date'
    EMPTY = 'empty'


@dataclass(frozen=True)
class CellValue:
    """A classified worksheet cell. `value` keeps the original scalar."""
    kind: CellKind
    value: object = None

    @classmethod
    def of(cls, raw):
        """Classifies a raw scalar as produced by the spreadsheet decoder."""
        if raw is None:
            return cls(CellKind.EMPTY)
        if isinstance(raw, str):
            return cls(CellKind.EMPTY) if raw == '' else cls(CellKind.TEXT, raw)
        if isinstance(raw, date):
            # pd.Timestamp and datetime are both date subclasses
            if pd.isna(raw):
                return cls(CellKind.EMPTY)
            return cls(CellKind.DATE, raw)
        if isinstance(raw, numbers.Number):
            if pd.isna(raw):
                return cls(CellKind.EMPTY)
            return cls(CellKind.NUMBER, raw)
        if pd.api.types.is_scalar(raw) and pd.isna(raw):
            return cls(CellKind.EMPTY)
        return cls(CellKind.TEXT, str(raw))

    def to_number(self):
        """
        Numeric reading of the cell. Empty cells, dates and text that does not
        parse as a finite number all read as 0; NaN never escapes.
        """
        if self.kind is CellKind.NUMBER:
            return float(self.value)
        if self.kind is CellKind.TEXT:
            text = self.value.strip()
            if not text:
                return 0.0
            parsed = pd.to_numeric(text, errors='coerce')
            if pd.isna(parsed) or not math.isfinite(parsed):
                return 0.0
            return float(parsed)
        return 0.0


def to_number(value):
    """Coerces any raw cell value to a float, falling back to 0."""
    return CellValue.of(value).to_number()


def is_numeric(value):
    """True for real numbers (booleans excluded)."""
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def _format_grouped(value):
    # 1234567.891 -> "1.234.567,89" (es-ES grouping and decimal separators)
    return f"{value:,.2f}".translate(str.maketrans(',.', '.,'))


def format_for_display(value):
    """
    Formats a cell for the on-screen table.

    Numbers strictly between 0 and 1 render as percentages ("1.50%"), numbers
    whose magnitude is at least 1 render with es-ES grouping and two decimals
    ("1.500,00"), anything else numeric renders with four decimals. Empty
    cells render as "-", dates as d/m/yyyy and text is trimmed.
    """
    cell = CellValue.of(value)
    if cell.kind is CellKind.EMPTY:
        return '-'

    if is_numeric(value):
        if 0 < value < 1:
            return f"{value * 100:.2f}%"
        if abs(value) >= 1:
            return _format_grouped(value)
        return f"{value:.4f}"

    if cell.kind is CellKind.DATE:
        return f"{value.day}/{value.month}/{value.year}"

    return str(value).strip()
