from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Any

from kit_inventory.services.dashboard import LOAD_ERROR

ENVELOPE_KEYS = frozenset({"success", "message", "data"})


def envelope(success: bool, message: str, data: Any = None) -> dict:
    """The {success, message, data} body every route answers with."""
    return jsonable_encoder({
        "success": success,
        "message": message,
        "data": data if data is not None else {},
    })


def is_envelope(body: Any) -> bool:
    return isinstance(body, dict) and ENVELOPE_KEYS.issubset(body.keys())


def success_resp(message: str, data: Any = None, status_code: int = 200, headers: dict = None):
    return JSONResponse(status_code=status_code, content=envelope(True, message, data), headers=headers)


def error_resp(message: str, status_code: int = 500, data: Any = None, headers: dict = None):
    return JSONResponse(status_code=status_code, content=envelope(False, message, data), headers=headers)


def load_error_resp(dashboard):
    """502 for a record set the store could not deliver; carries the dashboard state."""
    return error_resp(LOAD_ERROR, 502, dashboard.as_dict())
