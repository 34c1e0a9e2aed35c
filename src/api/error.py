"""HTTP error mapping for use case errors"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from libs.result import Error


class ClientError(Exception):
    """
    Use case Error raised from a route

    Rendered as {"error": {"code": ..., "message": ...}} with status_code.
    """

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.error = error
        self.status_code = status_code
        super().__init__(error.message)


ERROR_STATUS = {
    "CONTRACT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "JOB_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SHARE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "UNKNOWN_QUEUE": status.HTTP_404_NOT_FOUND,
    "CREDIT_HOLD": status.HTTP_403_FORBIDDEN,
    "INVOICE_NUMBER_CONFLICT": status.HTTP_409_CONFLICT,
    "CONTRACT_ALREADY_SHARED": status.HTTP_409_CONFLICT,
}


def raise_for_error(error: Error):
    """Raise ClientError with the status registered for the error code (400 otherwise)"""
    if error.code.endswith("_FAILED"):
        raise ClientError(error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    raise ClientError(error, status_code=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST))


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.error.code, "message": exc.error.message}},
    )
