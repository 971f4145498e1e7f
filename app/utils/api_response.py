from typing import Any

from fastapi import status


def success(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> dict:
    body: dict[str, Any] = {
        "success": True,
        "statusCode": status_code,
        "message": message,
    }
    if data is not None:
        body["data"] = data
    return body


def created(message: str, data: Any = None) -> dict:
    return success(message, data, status_code=status.HTTP_201_CREATED)


def error(message: str, status_code: int, details: Any = None) -> dict:
    body: dict[str, Any] = {
        "success": False,
        "statusCode": status_code,
        "message": message,
    }
    if details is not None:
        body["details"] = details
    return body
