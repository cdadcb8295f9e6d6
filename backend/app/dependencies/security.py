from fastapi import HTTPException, Request, status


def _error_payload(code: str, message: str, details: dict) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
        }
    }


def require_user_id_header(request: Request) -> str:
    """Caller identity comes from the x-user-id header set by the auth proxy."""
    user_id = (request.headers.get("x-user-id") or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_error_payload(
                "UNAUTHORIZED",
                "Missing or invalid user context.",
                {"required_header": "x-user-id"},
            ),
        )
    return user_id
