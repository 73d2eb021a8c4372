# finance/activity.py
# 📝 Activity log sink.
#    Views call record_activity() after a successful mutation. The sink is
#    fire-and-forget: whatever goes wrong inside it is logged and dropped,
#    never raised to the caller whose change already succeeded.

import logging

from django.conf import settings
from django.db import transaction
from django.utils.module_loading import import_string

from .models import ActivityLog

logger = logging.getLogger(__name__)


class ActivitySink:
    """Interface: write one activity entry. May raise; callers never see it."""

    def write(self, *, ledger, user, action, entity_type, entity_id, message):
        raise NotImplementedError


class DatabaseActivitySink(ActivitySink):
    def write(self, *, ledger, user, action, entity_type, entity_id, message):
        # savepoint: a failed insert must not poison the caller's transaction
        with transaction.atomic():
            ActivityLog.objects.create(
                ledger=ledger,
                user=user,
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id or ""),
                message=message,
            )


def get_activity_sink():
    """Instantiate the sink named by settings.LEDGERBOOK_ACTIVITY_SINK."""
    return import_string(settings.LEDGERBOOK_ACTIVITY_SINK)()


def record_activity(ledger, user, action, entity_type, message, entity_id=None, sink=None):
    """Best effort, at most once: returns True if the entry was written."""
    try:
        (sink or get_activity_sink()).write(
            ledger=ledger,
            user=user,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            message=message,
        )
    except Exception:
        logger.warning(
            "activity.write_failed ledger=%s action=%s entity=%s",
            getattr(ledger, "pk", None), action, entity_type,
            exc_info=True,
        )
        return False
    return True
