"""Maps domain rejections to HTTP responses."""

from rest_framework import status
from rest_framework.response import Response

from admissions.domain.errors import ErrorCode, Rejection

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CONTACT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REGISTRATION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TOKEN_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TOKEN_EXPIRED: status.HTTP_410_GONE,
    ErrorCode.TOKEN_INACTIVE: status.HTTP_410_GONE,
    ErrorCode.EVENT_INACTIVE: status.HTTP_409_CONFLICT,
    ErrorCode.OUTSIDE_WINDOW: status.HTTP_409_CONFLICT,
    ErrorCode.QUOTA_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_REFERENCE: status.HTTP_409_CONFLICT,
    ErrorCode.COOLDOWN_ACTIVE: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.PERSISTENCE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

RETRY_AFTER_SECONDS = "1"


def rejection_response(rejection: Rejection) -> Response:
    body = {
        "error": {
            "code": rejection.code.value,
            "message": rejection.message,
            "details": rejection.details,
            "retryable": rejection.retryable,
        }
    }
    headers = {"Retry-After": RETRY_AFTER_SECONDS} if rejection.retryable else None
    return Response(
        body,
        status=STATUS_BY_CODE.get(rejection.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        headers=headers,
    )


def invalid_payload_response(errors: dict) -> Response:
    return Response(
        {
            "error": {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": "Invalid registration data",
                "details": errors,
                "retryable": False,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )
