from pydantic import BaseModel, ConfigDict, field_validator
from enum import Enum

class AuditAction(str, Enum):
    ACCESSED = "Accessed"
    ATTEMPTED = "Attempted"
    RESTRICTED = "Restricted"

class AuditLogEntry(BaseModel):
    """One row of the patient's access history, as recorded by the decision service."""

    model_config = ConfigDict(frozen=True)

    who: str
    role: str
    action: AuditAction
    resource: str
    timestamp: str
    context: str
    decision_reason: str

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @property
    def was_denied(self) -> bool:
        # Attempted and restricted rows are access that was refused or limited
        return self.action in (AuditAction.ATTEMPTED, AuditAction.RESTRICTED)
