import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from . import errors

logger = logging.getLogger(__name__)

CATEGORY_STATUS = {
    errors.CONFIGURATION: status.HTTP_409_CONFLICT,
    errors.VALIDATION: status.HTTP_400_BAD_REQUEST,
    errors.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    errors.CONFLICT: status.HTTP_409_CONFLICT,
    errors.CAPACITY: status.HTTP_409_CONFLICT,
    errors.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

STATUS_OVERRIDES = {
    errors.InvalidAuthority: status.HTTP_400_BAD_REQUEST,
}


def registry_error_response(exc):
    http_status = STATUS_OVERRIDES.get(type(exc)) or CATEGORY_STATUS.get(
        exc.category, status.HTTP_400_BAD_REQUEST
    )
    return Response({"ok": False, "error": exc.as_dict()}, status=http_status)


def registry_exception_handler(exc, context):
    """
    Render registry failures as ``{"ok": false, "error": {...}}``; everything
    else goes through DRF's default handler.
    """
    if isinstance(exc, errors.RegistryError):
        view = context.get("view")
        logger.debug(f"{type(view).__name__} answered {exc.name} ({exc.code})")
        return registry_error_response(exc)

    return exception_handler(exc, context)
