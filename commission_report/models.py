# ==============================================================================
# commission_report/models.py
# ------------------------------------------------------------------------------
# Session state for the web interface. Each browser session owns one
# ReportSession holding the table read from its last upload. State lives in
# memory only and is gone when the process stops.
# ==============================================================================

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field

from commission_report.calculator.engine import delete_row, process_sheet, summarize_totals
from commission_report.calculator.report import build_report, export_json
from commission_report.calculator.schema import FALLBACK_AGENT_NAME

DEFAULT_MAX_SESSIONS = 100


@dataclass
class ReportSession:
    """
    The table a user is working on, with the headers needed to display it.
    The calculator functions stay stateless; this object carries their
    inputs and outputs between requests. Every operation on the table holds
    the session lock, so concurrent requests from one browser are applied
    one after the other.
    """
    id: str
    sheet_name: str = ''
    source_filename: str = ''
    rows: list = field(default_factory=list)
    headers: list = field(default_factory=list)
    displayed_headers: list = field(default_factory=list)
    _lock: object = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def __repr__(self):
        return f'<ReportSession {self.id}: {self.source_filename or "-"} ({len(self.rows)} rows)>'

    @property
    def sheet_label(self):
        return self.sheet_name or 'N/A'

    @property
    def is_empty(self):
        return not self.rows

    def load(self, worksheet, source_filename=''):
        """Re-runs the whole pipeline over a decoded worksheet, replacing the current table."""
        processed = process_sheet(worksheet.rows)
        with self._lock:
            self.sheet_name = worksheet.sheet_name
            self.source_filename = source_filename
            self.rows = processed.rows
            self.headers = processed.headers
            self.displayed_headers = processed.displayed_headers
        return self

    def delete_row(self, index, row_id=None):
        """Removes one row. Callers must only invoke this after the user confirmed."""
        with self._lock:
            delete_row(self.rows, index, row_id)

    def totals(self):
        with self._lock:
            return summarize_totals(self.rows)

    def build_report(self, today=None, fallback_agent=FALLBACK_AGENT_NAME):
        with self._lock:
            return build_report(self.rows, self.displayed_headers, today=today, fallback_agent=fallback_agent)

    def export_json(self):
        with self._lock:
            return export_json(self.rows)

    def clear(self):
        with self._lock:
            self.sheet_name = ''
            self.source_filename = ''
            self.rows = []
            self.headers = []
            self.displayed_headers = []


class SessionStore:
    """
    In-memory registry of ReportSession objects keyed by a random id.

    Holds at most `max_sessions` sessions. Creating one more drops the least
    recently used session.
    """

    def __init__(self, app=None, max_sessions=DEFAULT_MAX_SESSIONS):
        self._sessions = OrderedDict()
        self._lock = threading.Lock()
        self.max_sessions = max_sessions
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.max_sessions = app.config.get('REPORT_MAX_SESSIONS') or DEFAULT_MAX_SESSIONS
        app.extensions['report_sessions'] = self

    def get(self, session_id):
        if not session_id:
            return None
        with self._lock:
            report_session = self._sessions.get(session_id)
            if report_session is not None:
                self._sessions.move_to_end(session_id)
            return report_session

    def create(self):
        report_session = ReportSession(id=uuid.uuid4().hex)
        with self._lock:
            self._sessions[report_session.id] = report_session
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logging.info(f"Session store full ({self.max_sessions}); dropped report session {evicted_id}")
        logging.debug(f"Created report session {report_session.id}")
        return report_session

    def get_or_create(self, session_id):
        return self.get(session_id) or self.create()

    def discard(self, session_id):
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self):
        return len(self._sessions)
