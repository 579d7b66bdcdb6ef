from flask import current_app, g, request
from pydantic import ValidationError as SchemaError

from ..errors import ValidationError
from ..extensions import db
from ..store import ExpenseStore


def get_store() -> ExpenseStore:
    """Request-scoped store; built without a session when the store is disabled."""
    if "store" not in g:
        session = db.session if current_app.config.get("STORE_ENABLED", True) else None
        g.store = ExpenseStore(session)
    return g.store


def parse_body(schema):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except SchemaError as exc:
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid input", details=details)
