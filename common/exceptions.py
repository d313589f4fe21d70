# common/exceptions.py
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

UPGRADE_HINT = "Upgrade to Season Pass for unlimited access."


class StateConflict(APIException):
    """Operation on a terminal or time-expired exam session."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"
    default_code = "state_conflict"


class QuotaExceeded(APIException):
    """
    A tier limit was reached. The body explains the limit and the upgrade
    path; the denied action is never applied.
    """
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Limit reached."
    default_code = "quota_exceeded"

    def __init__(self, detail=None, *, limit=None, used=None, code=None):
        super().__init__(detail, code)
        self.limit = limit
        self.used = used
        # plain dict so limit/used stay numbers in the response body
        self.detail = {
            "detail": str(self.detail),
            "code": self.default_code,
            "limit": limit,
            "used": used,
            "upgrade": UPGRADE_HINT,
        }


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", type(view).__name__ if view else "request")
        return None

    if isinstance(exc, APIException) and isinstance(response.data, dict) and "detail" in response.data:
        response.data.setdefault("code", exc.default_code)
    return response
