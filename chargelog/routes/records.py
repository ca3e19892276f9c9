"""
Record routes for ChargeLog.

Create, list, replace and remove charging records. Derived fields are
always recomputed from the submitted input before a record is stored.
"""

import logging

from flask import Blueprint, jsonify, request

from ..calculations import apply_derived_fields
from ..extensions import get_store
from ..schema import SCHEMA
from ..services import StoreResult

logger = logging.getLogger(__name__)

records_bp = Blueprint("records", __name__)


def _persist_warning(store):
    error = store.last_persist_error
    return str(error) if error else None


def _record_payload(record, store):
    payload = record.to_dict()
    warning = _persist_warning(store)
    if warning:
        payload["persist_warning"] = warning
    return payload


def _fields_from_request():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    # Accept either {"fields": {...}} or the field mapping itself
    fields = data.get("fields", data)
    return fields if isinstance(fields, dict) else None


@records_bp.route("/records", methods=["GET"])
def list_records():
    """
    List records.

    Query params:
        sort: Field name to sort by (display only, store order is unchanged)
        order: 'asc' (default) or 'desc'
    """
    store = get_store()
    sort_field = request.args.get("sort")

    if sort_field:
        if sort_field not in SCHEMA:
            return jsonify({"error": f"Unknown sort field: {sort_field}"}), 400
        descending = request.args.get("order", "asc").lower() == "desc"
        records = store.sorted_records(sort_field, descending=descending)
    else:
        records = store.list()

    return jsonify({
        "schema": list(SCHEMA),
        "records": [r.to_dict() for r in records],
        "count": len(records),
    })


@records_bp.route("/records", methods=["POST"])
def create_record():
    """Create a record from submitted field values."""
    store = get_store()
    fields = _fields_from_request()
    if fields is None:
        return jsonify({"error": "No data provided"}), 400

    record_id = store.create(apply_derived_fields(fields))
    logger.info(f"Record {record_id} created")
    return jsonify(_record_payload(store.get(record_id), store)), 201


@records_bp.route("/records/derive", methods=["POST"])
def derive_fields():
    """Preview the derived fields for form input without storing anything."""
    fields = _fields_from_request()
    if fields is None:
        return jsonify({"error": "No data provided"}), 400
    return jsonify({"fields": apply_derived_fields(fields)})


@records_bp.route("/records/<record_id>", methods=["GET"])
def get_record(record_id):
    record = get_store().get(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404
    return jsonify(record.to_dict())


@records_bp.route("/records/<record_id>", methods=["PUT"])
def update_record(record_id):
    """
    Replace all fields of a record.

    Query params:
        upsert: If true, create a new record when the id is unknown
    """
    store = get_store()
    fields = _fields_from_request()
    if fields is None:
        return jsonify({"error": "No data provided"}), 400

    fields = apply_derived_fields(fields)
    result = store.update(record_id, fields)

    if result is StoreResult.NOT_FOUND:
        if request.args.get("upsert", "").lower() in ("1", "true", "yes"):
            new_id = store.create(fields)
            logger.info(f"Record {record_id} not found, created {new_id} instead")
            return jsonify(_record_payload(store.get(new_id), store)), 201
        return jsonify({"error": "Record not found"}), 404

    return jsonify(_record_payload(store.get(record_id), store))


@records_bp.route("/records/<record_id>", methods=["DELETE"])
def delete_record(record_id):
    store = get_store()
    if store.remove(record_id) is StoreResult.NOT_FOUND:
        return jsonify({"error": "Record not found"}), 404

    response = {"message": "Record deleted", "id": record_id}
    warning = _persist_warning(store)
    if warning:
        response["persist_warning"] = warning
    return jsonify(response)
