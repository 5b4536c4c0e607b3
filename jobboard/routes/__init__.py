from typing import Any, Dict

from flask import request

from jobboard.validators import ensure_object


def json_body() -> Dict[str, Any]:
    return ensure_object(request.get_json(force=True, silent=True))
