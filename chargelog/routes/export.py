"""
Export routes for ChargeLog.

Handles CSV download (plain and spreadsheet variants), CSV import and
seeding from the configured initial CSV.
"""

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from ..extensions import RateLimits, get_store, limiter
from ..services import seed_store
from ..utils.csv_codec import header_mode_or_default, serialize_document
from ..utils.wide_events import track_operation

logger = logging.getLogger(__name__)

export_bp = Blueprint('export', __name__)


def _csv_download(filename: str, include_bom: bool) -> Response:
    store = get_store()
    if store.is_empty():
        return jsonify({'error': 'No records to download yet.'}), 404

    with track_operation('csv_export', include_bom=include_bom) as event:
        records = store.field_maps()
        csv_text = serialize_document(records, include_bom=include_bom)
        event.add_business_metric('records_exported', len(records))

    return Response(
        csv_text,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@export_bp.route('/export/csv', methods=['GET'])
@limiter.limit(RateLimits.EXPENSIVE)
def export_csv() -> Response:
    """Download all records as CSV."""
    return _csv_download(current_app.config['EXPORT_FILENAME'], include_bom=False)


@export_bp.route('/export/gsheets', methods=['GET'])
@limiter.limit(RateLimits.EXPENSIVE)
def export_gsheets() -> Response:
    """Same CSV with a UTF-8 BOM so Excel / Google Sheets detect the encoding."""
    return _csv_download(current_app.config['GSHEETS_EXPORT_FILENAME'], include_bom=True)


@export_bp.route('/import', methods=['POST'])
@limiter.limit(RateLimits.VERY_EXPENSIVE)
def import_csv():
    """
    Import records from an uploaded CSV file.

    Accepts multipart form data with a CSV file.

    Form fields:
        mode: 'append' (default) or 'replace'
        header_mode: 'positional' (default from config) or 'header'

    Returns:
        JSON with the new record ids and import statistics
    """
    if 'file' not in request.files:
        return jsonify({'error': 'No file provided'}), 400

    file = request.files['file']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    if not file.filename.lower().endswith('.csv'):
        return jsonify({'error': 'File must be a CSV'}), 400

    mode = request.form.get('mode', 'append').lower()
    if mode not in ('append', 'replace'):
        return jsonify({'error': f'Unknown import mode: {mode}'}), 400

    try:
        header_mode = header_mode_or_default(
            request.form.get('header_mode'), current_app.config['CSV_HEADER_MODE']
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        csv_content = file.read().decode('utf-8-sig')
    except UnicodeDecodeError:
        return jsonify({
            'error': 'The file contains invalid characters. Save it as UTF-8 and try again.'
        }), 400

    store = get_store()
    with track_operation('csv_import', filename=file.filename, mode=mode,
                         header_mode=header_mode) as event:
        ids, stats = store.import_csv(csv_content, header_mode, replace=(mode == 'replace'))
        event.add_business_metric('rows_imported', len(ids))
        event.add_business_metric('short_rows', stats['short_rows'])

    if not ids and mode == 'append':
        return jsonify({'message': 'No data rows found in CSV', 'stats': stats}), 400

    response = {
        'message': f'Imported {len(ids)} records',
        'ids': ids,
        'stats': stats,
    }
    if store.last_persist_error:
        response['persist_warning'] = str(store.last_persist_error)
    return jsonify(response)


@export_bp.route('/seed', methods=['POST'])
@limiter.limit(RateLimits.VERY_EXPENSIVE)
def seed():
    """Seed an empty store from the configured initial CSV."""
    result = seed_store(
        get_store(),
        current_app.config['SEED_SOURCE'],
        header_mode=current_app.config['CSV_HEADER_MODE'],
        timeout=current_app.config['SEED_TIMEOUT_SECONDS'],
    )
    return jsonify(result.to_dict())
