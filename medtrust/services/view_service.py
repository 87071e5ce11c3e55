from enum import Enum
from typing import Optional

from medtrust.core.policy_engine import DecisionClient, PolicyDecisionService
from medtrust.schemas.access_schemas import DecisionOutcome
from medtrust.services.log_service import AuditLogStore
from medtrust.services.request_builder import RequestBuilder

class Perspective(str, Enum):
    REQUESTER = "requester"
    TRANSPARENCY = "transparency"

class ViewController:
    """
    Switches between the clinician's request form and the patient's transparency dashboard.
    Entering the dashboard always refreshes the log; leaving it keeps the form and last decision.
    """

    def __init__(self, builder: Optional[RequestBuilder] = None,
                 decision_client: Optional[DecisionClient] = None,
                 audit_store: Optional[AuditLogStore] = None,
                 service: Optional[PolicyDecisionService] = None):
        service = service or PolicyDecisionService()
        self.builder = builder or RequestBuilder()
        self.decision_client = decision_client or DecisionClient(service)
        self.audit_store = audit_store or AuditLogStore(service)
        self.perspective = Perspective.REQUESTER

    @property
    def active_components(self) -> tuple:
        if self.perspective is Perspective.REQUESTER:
            return (self.builder, self.decision_client)
        return (self.audit_store,)

    async def switch_to(self, perspective: Perspective):
        self.perspective = Perspective(perspective)
        if self.perspective is Perspective.TRANSPARENCY:
            await self.audit_store.refresh()

    async def submit(self) -> DecisionOutcome:
        return await self.decision_client.submit(self.builder.build())
