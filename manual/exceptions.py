"""
Manual error types.

Each maps onto a DRF exception so views can let them propagate and get the
right status code and a ``{"detail": ..., "code": ...}`` body.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.views import exception_handler as drf_exception_handler


class ContentNotFound(NotFound):
    """Entity is missing, or hidden from the public surface (unpublished)."""
    default_detail = 'Content not found.'
    default_code = 'NOT_FOUND'


class BlockNotFound(NotFound):
    default_detail = 'Block not found.'
    default_code = 'BLOCK_NOT_FOUND'


class UnknownBlockType(ValidationError):
    default_detail = 'Unknown block type.'
    default_code = 'UNKNOWN_BLOCK_TYPE'


class InvalidBlockContent(ValidationError):
    default_detail = 'Block content does not match its type.'
    default_code = 'INVALID_BLOCK_CONTENT'


class UploadRejected(ValidationError):
    default_detail = 'File type not allowed.'
    default_code = 'UPLOAD_REJECTED'


class BackendFailure(APIException):
    """A create/update/delete against the database failed. Not retried."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Could not save changes. Please try again.'
    default_code = 'BACKEND_FAILURE'


class UploadFailed(BackendFailure):
    default_detail = 'File upload failed.'
    default_code = 'UPLOAD_FAILED'


class InvalidOperation(ValidationError):
    default_detail = 'Invalid editor operation.'
    default_code = 'INVALID_OPERATION'


def exception_handler(exc, context):
    """
    DRF's handler, plus a top-level ``code`` for single-message errors:

        {"detail": "Block not found.", "code": "BLOCK_NOT_FOUND"}

    Field-level validation errors keep DRF's per-field shape.
    """
    response = drf_exception_handler(exc, context)
    if response is None or not isinstance(exc, APIException):
        return response

    codes = exc.get_codes()
    if isinstance(response.data, dict) and 'detail' in response.data and isinstance(codes, str):
        response.data['code'] = codes
    elif isinstance(response.data, list) and len(response.data) == 1 and isinstance(codes, list) and len(codes) == 1:
        response.data = {'detail': response.data[0], 'code': codes[0]}
    return response
