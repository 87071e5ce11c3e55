import asyncio
import itertools
import json
import logging
from typing import List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from medtrust.core.config import settings
from medtrust.core.exceptions import UnrecognizedDecisionError
from medtrust.schemas.access_schemas import (
    AccessRequest,
    CONNECTIVITY_FAILURE_RATIONALE,
    Decision,
    DecisionOutcome,
    DecisionResponse,
)
from medtrust.schemas.audit_schemas import AuditLogEntry

logger = logging.getLogger(__name__)

AUDIT_LOG_ADAPTER = TypeAdapter(List[AuditLogEntry])


class PolicyDecisionService:
    """
    HTTP client for the external policy decision service.
    Both calls raise on any transport, status or payload problem; callers decide how to recover.
    """

    def __init__(self, decision_url: Optional[str] = None, audit_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.decision_url = decision_url or settings.DECISION_SERVICE_URL
        self.audit_url = audit_url or settings.AUDIT_LOG_URL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT

    def evaluate_access(self, request: AccessRequest) -> DecisionResponse:
        payload = request.to_payload()
        logger.debug("Sending to decision service: %s", json.dumps(payload))

        response = requests.post(self.decision_url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        return DecisionResponse.model_validate(response.json())

    def fetch_audit_log(self) -> List[AuditLogEntry]:
        response = requests.get(self.audit_url, timeout=self.timeout)
        response.raise_for_status()
        return AUDIT_LOG_ADAPTER.validate_python(response.json())


class DecisionClient:
    """
    Turns an AccessRequest into a pending-then-resolved DecisionOutcome.

    Every submit() replaces `outcome` with a fresh pending one before the call starts.
    A call that settles after a newer submission only settles its own, no longer
    displayed, outcome. Any failure to obtain a recognized answer is a DENY.
    """

    def __init__(self, service: Optional[PolicyDecisionService] = None):
        self.service = service or PolicyDecisionService()
        self.outcome: Optional[DecisionOutcome] = None
        self._submission_ids = itertools.count(1)

    async def submit(self, request: AccessRequest) -> DecisionOutcome:
        outcome = DecisionOutcome(submission_id=next(self._submission_ids))
        self.outcome = outcome

        try:
            response = await asyncio.to_thread(self.service.evaluate_access, request)
        except UnrecognizedDecisionError as e:
            logger.error("Decision service returned %r for submission %d, failing closed",
                         e.value, outcome.submission_id)
            outcome.settle(Decision.DENY, CONNECTIVITY_FAILURE_RATIONALE)
        except (requests.exceptions.RequestException, ValidationError, ValueError) as e:
            logger.error("Access Check API Error on submission %d: %s", outcome.submission_id, e)
            outcome.settle(Decision.DENY, CONNECTIVITY_FAILURE_RATIONALE)
        except Exception:
            # FAIL CLOSED: no answer is never an ALLOW
            logger.exception("Unexpected error evaluating submission %d", outcome.submission_id)
            outcome.settle(Decision.DENY, CONNECTIVITY_FAILURE_RATIONALE)
        else:
            outcome.settle(response.decision, response.log)

        if outcome is not self.outcome:
            logger.debug("Discarding result of superseded submission %d", outcome.submission_id)
        return outcome
