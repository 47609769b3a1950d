from fastapi import HTTPException, status


def error_response(message: str, http_status: int = status.HTTP_400_BAD_REQUEST):
    raise HTTPException(status_code=http_status, detail=message)


def not_found(message: str = "Not found"):
    return error_response(message, http_status=status.HTTP_404_NOT_FOUND)


def forbidden(message: str = "Access denied"):
    return error_response(message, http_status=status.HTTP_403_FORBIDDEN)
