from typing import Any, Optional

import orjson
from fastapi.responses import JSONResponse


class PrettyJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return orjson.dumps(
            content,
            option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS
        )


def error_response(status_code: int, error: str, code: str, details: Optional[str] = None,
                   headers: Optional[dict] = None, **extra) -> PrettyJSONResponse:
    content = {"error": error, "code": code}
    if details:
        content["details"] = details
    content.update(extra)
    return PrettyJSONResponse(status_code=status_code, content=content, headers=headers)
