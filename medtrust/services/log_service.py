import asyncio
import itertools
import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional

import requests
from pydantic import ValidationError

from medtrust.core.policy_engine import PolicyDecisionService
from medtrust.schemas.audit_schemas import AuditAction, AuditLogEntry

logger = logging.getLogger(__name__)

FALLBACK_REASON = "Error fetching logs from backend."
EMPTY_STATE_MESSAGE = 'No access logs to display. Click "Refresh Access Logs".'

class AuditLogStatus(str, Enum):
    NOT_LOADED = "not_loaded"
    EMPTY = "empty"
    LOADED = "loaded"
    FAILED = "failed"


def fallback_entry() -> AuditLogEntry:
    """Stands in for the history when it could not be fetched."""
    return AuditLogEntry(
        who="System",
        role="N/A",
        action=AuditAction.ATTEMPTED,
        resource="N/A",
        timestamp=datetime.now().strftime("%H:%M:%S"),
        context="N/A",
        decision_reason=FALLBACK_REASON,
    )


class AuditLogStore:
    """
    Holds the latest snapshot of the patient's access log, in the order the service sent it.
    Each refresh() replaces the snapshot entirely.
    """

    def __init__(self, service: Optional[PolicyDecisionService] = None):
        self.service = service or PolicyDecisionService()
        self.entries: List[AuditLogEntry] = []
        self.status = AuditLogStatus.NOT_LOADED
        self._refresh_ids = itertools.count(1)
        self._latest_refresh = 0

    async def refresh(self) -> List[AuditLogEntry]:
        refresh_id = self._latest_refresh = next(self._refresh_ids)

        try:
            entries = await asyncio.to_thread(self.service.fetch_audit_log)
            status = AuditLogStatus.LOADED if entries else AuditLogStatus.EMPTY
        except (requests.exceptions.RequestException, ValidationError, ValueError) as e:
            logger.error("Patient Log API Error: %s", e)
            entries, status = [fallback_entry()], AuditLogStatus.FAILED
        except Exception:
            logger.exception("Unexpected error fetching the patient log")
            entries, status = [fallback_entry()], AuditLogStatus.FAILED

        if refresh_id != self._latest_refresh:
            logger.debug("Discarding result of superseded log refresh %d", refresh_id)
            return self.entries

        self.entries = list(entries)
        self.status = status
        return self.entries

    @property
    def fetch_failed(self) -> bool:
        return self.status is AuditLogStatus.FAILED

    @property
    def is_empty(self) -> bool:
        return not self.entries
