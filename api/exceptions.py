"""
Custom Exception Handler for API

Every error leaves the API as ``{"success": false, "message", "code",
"errors"?}``. Domain exceptions carry their own status code; DRF
validation errors are flattened into ``errors`` entries of
``{"field", "message"}``.
"""
import logging

from django.conf import settings
from django.http import Http404, JsonResponse
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.exceptions import AccountLockedException, GreenZestException, ValidationException

logger = logging.getLogger(__name__)

DRF_CODES = {
    exceptions.NotAuthenticated: "NOT_AUTHENTICATED",
    exceptions.AuthenticationFailed: "AUTHENTICATION_FAILED",
    exceptions.PermissionDenied: "FORBIDDEN",
    exceptions.NotFound: "NOT_FOUND",
    exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    exceptions.ParseError: "PARSE_ERROR",
    exceptions.Throttled: "THROTTLED",
}


def flatten_errors(detail, prefix: str = ''):
    """
    Turn DRF's nested error structure into a flat list. Nested fields use
    dotted paths (``items.0.quantity``); non-field errors have no field.
    """
    errors = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            key = '' if key == 'non_field_errors' else str(key)
            path = '.'.join(part for part in (prefix, key) if part)
            errors.extend(flatten_errors(value, path))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                path = '.'.join(part for part in (prefix, str(index)) if part)
                errors.extend(flatten_errors(value, path))
            else:
                errors.append({"field": prefix or None, "message": str(value)})
    else:
        errors.append({"field": prefix or None, "message": str(detail)})
    return errors


def error_body(message: str, code: str = None, errors=None) -> dict:
    body = {"success": False, "message": message}
    if code:
        body["code"] = code
    if errors:
        body["errors"] = errors
    return body


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error responses.
    """
    if isinstance(exc, GreenZestException):
        errors = None
        if isinstance(exc, ValidationException) and exc.field:
            errors = [{"field": exc.field, "message": exc.message}]
        body = error_body(exc.message, exc.code, errors)
        if isinstance(exc, AccountLockedException) and exc.lock_until:
            body["lock_until"] = exc.lock_until.isoformat()
        return Response(body, status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            errors = flatten_errors(exc.detail)
            message = errors[0]["message"] if len(errors) == 1 else "Invalid data"
            response.data = error_body(message, "VALIDATION_ERROR", errors)
        else:
            detail = getattr(exc, 'detail', None) or str(exc)
            code = DRF_CODES.get(type(exc))
            if code is None and isinstance(exc, Http404):
                code = "NOT_FOUND"
            response.data = error_body(str(detail), code)
        return response

    # Handle unexpected exceptions
    view = context.get('view')
    logger.exception(f"Unhandled exception in {view.__class__.__name__ if view else 'API'}: {exc}")
    body = error_body("An unexpected error occurred", "SERVER_ERROR")
    if settings.DEBUG:
        body["detail"] = str(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def route_not_found(request, exception=None):
    """JSON replacement for Django's 404 page."""
    return JsonResponse(
        error_body(f"Route {request.path} not found", "NOT_FOUND"),
        status=status.HTTP_404_NOT_FOUND,
    )


def server_error(request):
    """JSON replacement for Django's 500 page."""
    return JsonResponse(
        error_body("An unexpected error occurred", "SERVER_ERROR"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
