from typing import Any

from fastapi.responses import JSONResponse


def success(data: Any, message: str) -> dict:
    """공통 성공 응답 포맷"""
    return {"success": True, "data": data, "message": message}


def failure(code: int, message: str) -> JSONResponse:
    """공통 실패 응답 포맷 (HTTP 상태 코드 = error.code)"""
    return JSONResponse(
        status_code=code,
        content={"success": False, "error": {"code": code, "message": message}},
    )
