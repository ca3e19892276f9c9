"""
Routes module for ChargeLog Flask blueprints.
"""

from .dashboard import dashboard_bp
from .export import export_bp
from .records import records_bp

__all__ = [
    "dashboard_bp",
    "export_bp",
    "records_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(dashboard_bp, url_prefix="/api")
    app.register_blueprint(records_bp, url_prefix="/api")
    app.register_blueprint(export_bp, url_prefix="/api")
