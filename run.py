# ==============================================================================
# run.py
# ------------------------------------------------------------------------------
# The main entry point to launch the Flask application.
# ==============================================================================

from commission_report import create_app, store
from commission_report.calculator import engine, report

# Create the Flask application instance using the factory function
app = create_app()

@app.shell_context_processor
def make_shell_context():
    """Provides a shell context for the `flask shell` command."""
    return {
        'store': store,
        'engine': engine,
        'report': report
    }

if __name__ == '__main__':
    app.run(debug=True)
