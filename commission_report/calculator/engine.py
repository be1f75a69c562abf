# ==============================================================================
# commission_report/calculator/engine.py
# ------------------------------------------------------------------------------
# Turns the decoded worksheet rows into the commission table: header
# normalization, the tiered commission rate, the three derived columns,
# the display projection, totals and row deletion.
# ==============================================================================

import logging
import uuid
from dataclasses import dataclass, field

from .cells import to_number
from .schema import (
    ADJUSTED_AMOUNT_COLUMN, ADJUSTMENT_DIVISOR, DERIVED_COLUMNS, DISPLAY_COLUMNS,
    EARNED_AMOUNT_COLUMN, EARNED_RATE_COLUMN, TOTAL_BEFORE_TAX_COLUMN, UTIL_PERCENT_COLUMN
)

# --- Commission Rate Table ---

# (inclusive upper bound of the profit percentage, commission rate)
RATE_TIERS = (
    (5, 0.0),
    (9, 0.0015),
    (19, 0.007),
    (38, 0.015),
    (63, 0.03),
    (99, 0.05),
)
TOP_TIER_RATE = 0.05


def commission_rate(util_percent):
    """Returns the commission rate for a profit percentage. Ties fall to the lower tier."""
    for upper_bound, rate in RATE_TIERS:
        if util_percent <= upper_bound:
            return rate
    return TOP_TIER_RATE


class RowIndexError(IndexError):
    """Raised when a row index does not point at an existing table row."""


class StaleRowError(RowIndexError):
    """Raised when the row at an index is not the row the caller expected."""


@dataclass
class NormalizedRow:
    """
    One worksheet row keyed by canonical (trimmed) header names, plus its
    1-based position in the table. `row_id` identifies the row across
    renumbering.
    """
    sequence: int
    values: dict = field(default_factory=dict)
    row_id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    def __getitem__(self, header):
        return self.values[header]

    def __setitem__(self, header, value):
        self.values[header] = value

    def __contains__(self, header):
        return header in self.values

    def get(self, header, default=None):
        return self.values.get(header, default)

    @property
    def earned_rate(self):
        return self.values.get(EARNED_RATE_COLUMN)

    @property
    def earned_amount(self):
        return self.values.get(EARNED_AMOUNT_COLUMN)

    @property
    def adjusted_amount(self):
        return self.values.get(ADJUSTED_AMOUNT_COLUMN)

    def as_record(self):
        """Column values without the sequence number, in column order."""
        return dict(self.values)


@dataclass
class ProcessedSheet:
    rows: list = field(default_factory=list)
    headers: list = field(default_factory=list)
    displayed_headers: list = field(default_factory=list)


# --- Row Pipeline ---

def canonical_headers(original_headers):
    return [str(header).strip() for header in original_headers]


def normalize_row(raw_row, index, original_headers=None):
    """
    Copies a raw row into a NormalizedRow keyed by trimmed header names.

    Values are copied by header position, so two original headers that trim
    to the same name both write to one slot and the later column wins.

    Args:
        raw_row (dict): Original header -> cell value.
        index (int): 0-based position of the row in the worksheet.
        original_headers (list): Header order to use; defaults to the row's own keys.

    Returns:
        NormalizedRow: The row with sequence = index + 1 and no derived columns yet.
    """
    if original_headers is None:
        original_headers = list(raw_row.keys())
    clean_headers = canonical_headers(original_headers)

    row = NormalizedRow(sequence=index + 1)
    for i, original_header in enumerate(original_headers):
        row[clean_headers[i]] = raw_row.get(original_header)
    return row


def derive_columns(row):
    """Computes % UTIL GANADA, MONTO GANADO and COLUMNA 3 on the row in place."""
    util_percent = to_number(row.get(UTIL_PERCENT_COLUMN))
    total_before_tax = to_number(row.get(TOTAL_BEFORE_TAX_COLUMN))

    earned_rate = commission_rate(util_percent)
    earned_amount = total_before_tax * earned_rate
    adjusted_amount = earned_amount / ADJUSTMENT_DIVISOR

    row[EARNED_RATE_COLUMN] = earned_rate
    row[EARNED_AMOUNT_COLUMN] = earned_amount
    row[ADJUSTED_AMOUNT_COLUMN] = adjusted_amount

    logging.debug(
        f"Row {row.sequence}: util={util_percent} total={total_before_tax:,.2f} "
        f"-> rate={earned_rate:.2%} earned={earned_amount:,.2f} adjusted={adjusted_amount:,.2f}"
    )
    return row


def display_projection(headers):
    """Preferred columns present in the sheet, plus the derived ones, in preferred order."""
    available = set(headers) | set(DERIVED_COLUMNS)
    return [header for header in DISPLAY_COLUMNS if header in available]


def process_sheet(raw_rows):
    """
    Runs the full pipeline over the decoded rows of one worksheet.

    Args:
        raw_rows (list): Raw rows in worksheet order, each a dict keyed by the
            original (possibly padded) header names.

    Returns:
        ProcessedSheet: The derived table, the canonical headers of the sheet
        and the headers to display. Empty input yields an empty sheet.
    """
    if not raw_rows:
        logging.info("Worksheet has no data rows. Nothing to process.")
        return ProcessedSheet()

    original_headers = list(raw_rows[0].keys())
    headers = canonical_headers(original_headers)

    rows = []
    for index, raw_row in enumerate(raw_rows):
        row = normalize_row(raw_row, index, original_headers)
        rows.append(derive_columns(row))

    displayed_headers = display_projection(headers)
    logging.info(f"Processed {len(rows)} rows. Displayed columns: {displayed_headers}")
    return ProcessedSheet(rows=rows, headers=headers, displayed_headers=displayed_headers)


# --- Aggregation ---

def total_of(rows, field_name):
    """Sum of a column over the current rows; missing or non-numeric cells count as 0."""
    return sum(to_number(row.get(field_name)) for row in rows)


def summarize_totals(rows):
    return {
        EARNED_AMOUNT_COLUMN: total_of(rows, EARNED_AMOUNT_COLUMN),
        ADJUSTED_AMOUNT_COLUMN: total_of(rows, ADJUSTED_AMOUNT_COLUMN),
    }


def delete_row(rows, index, row_id=None):
    """
    Removes one row from the table and renumbers the sequences to 1..N-1.

    When row_id is given, the row at index must carry that id.

    Raises:
        RowIndexError: If index is outside 0 <= index < len(rows).
        StaleRowError: If the row at index is not the row identified by row_id.
        In both cases the table is left unchanged.
    """
    if not 0 <= index < len(rows):
        raise RowIndexError(f"Row index {index} is out of range for a table of {len(rows)} rows.")
    if row_id is not None and rows[index].row_id != row_id:
        raise StaleRowError(f"Row {index + 1} is no longer the row {row_id} the request refers to.")

    removed = rows.pop(index)
    for position, row in enumerate(rows, start=1):
        row.sequence = position

    logging.info(f"Deleted row {removed.sequence}. {len(rows)} rows remain.")
    return rows
