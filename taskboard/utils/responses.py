"""The JSON envelope every endpoint answers with: {status, message, code, data?}."""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(status: str, message: str, code: int, data: Any = None) -> dict:
    body = {"status": status, "message": message, "code": code}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def success(data: Any = None, message: str = "Success", code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=code, content=envelope("success", message, code, data))


def error(message: str = "Error", code: int = 400, data: Optional[Any] = None, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=code, content=envelope("error", message, code, data), headers=headers)
