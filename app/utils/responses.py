# app/utils/responses.py

from datetime import datetime
from bson import ObjectId


def format_response(**data):
    return {"ok": True, **data}

def format_error_response(detail):
    return {
        "ok": False,
        "error": detail,
    }


def serialize_value(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_doc(value)
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value

def serialize_doc(doc):
    """Make a Mongo document JSON friendly: ``_id`` becomes ``id``, ObjectIds and datetimes become strings."""
    if not doc:
        return doc
    d = dict(doc)
    if "_id" in d:
        d["id"] = d.pop("_id")
    return {k: serialize_value(v) for k, v in d.items()}
