"""
Dashboard routes for ChargeLog.

Handles the summary statistics and status endpoints.
"""

from flask import Blueprint, Response, current_app, jsonify

from ..calculations import dashboard_summary
from ..extensions import get_store

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/status', methods=['GET'])
def get_status() -> Response:
    """Get store size, storage backend and the last persistence error, if any."""
    store = get_store()
    error = store.last_persist_error

    return jsonify({
        'status': 'online',
        'records': len(store),
        'storage_backend': store.adapter.backend if store.adapter else None,
        'storage_key': current_app.config.get('STORAGE_KEY'),
        'persist_error': str(error) if error else None,
    })


@dashboard_bp.route('/dashboard', methods=['GET'])
def get_dashboard() -> Response:
    """Total expenditure and days since the last full charge."""
    return jsonify(dashboard_summary(get_store().field_maps()))
