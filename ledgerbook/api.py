# ledgerbook/api.py
# ─────────────────────────────────────────────────────────────────────────────
# Shared plumbing for the JSON API:
#   • ApiError hierarchy (one class per HTTP status we hand out)
#   • ApiView – a View whose dispatch() is the single error boundary
#   • ApiLoginRequiredMixin – LoginRequiredMixin that answers 401 JSON
#   • read_json / validate_form helpers
# Every response body on failure is {"error": "<message>"}.
# ─────────────────────────────────────────────────────────────────────────────

import json
import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import ValidationError as ModelValidationError
from django.db.models.deletion import ProtectedError
from django.http import JsonResponse
from django.views import View

logger = logging.getLogger(__name__)


# ===== Error taxonomy ========================================================

class ApiError(Exception):
    """Base class for errors that map straight onto an HTTP status."""
    status = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    status = 400
    default_message = "Invalid request"


class Unauthenticated(ApiError):
    status = 401
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status = 403
    default_message = "Forbidden"


class NotFound(ApiError):
    status = 404
    default_message = "Not found"


class Conflict(ApiError):
    status = 409
    default_message = "Conflict"


def error_response(message, status):
    return JsonResponse({"error": message}, status=status)


# ===== Request helpers =======================================================

def read_json(request):
    """Decode the request body as a JSON object; empty body → {}."""
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def validate_form(form):
    """Run the form; on failure raise ValidationError with its first message."""
    if form.is_valid():
        return form.cleaned_data
    for field, errors in form.errors.items():
        message = errors[0]
        if field == "__all__":
            raise ValidationError(message)
        raise ValidationError(f"{field}: {message}")
    raise ValidationError()


# ===== Views =================================================================

class ApiView(View):
    """
    Base view for every JSON endpoint.
    dispatch() catches everything: ApiError → its status, model validation and
    ProtectedError → 400, anything else → logged and turned into a generic 500.
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except ApiError as exc:
            return error_response(exc.message, exc.status)
        except ModelValidationError as exc:
            return error_response(exc.messages[0] if exc.messages else "Invalid request", 400)
        except ProtectedError:
            return error_response("Cannot delete: the record is still referenced", 400)
        except Exception:
            logger.exception("api.unhandled method=%s path=%s", request.method, request.path)
            return error_response("Internal server error", 500)

    def http_method_not_allowed(self, request, *args, **kwargs):
        response = error_response(f"Method {request.method} not allowed", 405)
        response["Allow"] = ", ".join(m.upper() for m in self._allowed_methods())
        return response


class ApiLoginRequiredMixin(LoginRequiredMixin):
    """Same check as LoginRequiredMixin, but no redirect: a 401 JSON envelope."""

    def handle_no_permission(self):
        return error_response(Unauthenticated.default_message, Unauthenticated.status)
