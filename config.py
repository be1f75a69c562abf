# ==============================================================================
# config.py
# ------------------------------------------------------------------------------
# Configuration settings for the Flask application.
# Uses environment variables so deployments can override the defaults.
# ==============================================================================

import os
from dotenv import load_dotenv

# Determine the absolute path of the project directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from a .env file located in the project root
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    """
    Base configuration class. Contains default settings that can be overridden
    by environment-specific configurations.
    """
    # --- Security ---
    # Signs the session cookie that carries the report session id.
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-should-really-set-a-secret-key-in-your-env-file'

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # --- File Upload Configuration ---
    # Uploaded worksheets are decoded in memory and never written to disk.
    ALLOWED_EXTENSIONS = {'.xlsx', '.xls'}

    # Optional: Set a maximum file size for uploads (e.g., 16 MB)
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # --- Report Export ---
    # Agent name used in the export file name when the first row has no 'Vendedor'.
    REPORT_FALLBACK_AGENT = os.environ.get('REPORT_FALLBACK_AGENT') or 'Sin vendedor'

    # --- Session Store ---
    # Upper bound on the report sessions held in memory; the least recently
    # used one is dropped when a new session would exceed it.
    REPORT_MAX_SESSIONS = int(os.environ.get('REPORT_MAX_SESSIONS') or 100)
