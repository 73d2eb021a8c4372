# ledgerbook/views.py
# ✅ Project-wide error handlers: keep the {"error": ...} envelope even for
#    URLs that no app route matches, and for requests the CSRF check rejects.

import logging

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def page_not_found_view(request, exception):
    return JsonResponse({"error": "Not found"}, status=404)


def server_error_view(request):
    return JsonResponse({"error": "Internal server error"}, status=500)


def csrf_failure_view(request, reason=""):
    logger.info("csrf.rejected method=%s path=%s reason=%s", request.method, request.path, reason)
    return JsonResponse({"error": "CSRF verification failed"}, status=403)
