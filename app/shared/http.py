from fastapi.responses import JSONResponse
from typing import Any

def ok(data: Any = None, status: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status, content=data)

def err(message: str, status: int = 400) -> JSONResponse:
    # every error leaves the API as {"error": "<message>"}
    return JSONResponse(status_code=status, content={"error": message})
