from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum

from medtrust.core.exceptions import UnrecognizedDecisionError

class Role(str, Enum):
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    ADMIN = "Admin"
    LAB_TECHNICIAN = "Lab Technician"

class LocationClass(str, Enum):
    INTERNAL = "Internal_IP"
    EXTERNAL = "External_IP"

class TimeOfDay(str, Enum):
    DAYTIME = "Daytime"
    NIGHTTIME = "Nighttime"

class Decision(str, Enum):
    PENDING = "PENDING"
    ALLOW = "ALLOW"
    RESTRICT = "RESTRICT"
    DENY = "DENY"

# Static reference data shown in the request form
ROLES = [role.value for role in Role]
LOCATIONS = ["Internal_IP (Hospital)", "External_IP (Home/Public)"]
TIME_LABELS = {
    TimeOfDay.DAYTIME: "Daytime (8am-5pm)",
    TimeOfDay.NIGHTTIME: "Nighttime (After Hours)",
}

RESOLVED_DECISIONS = [Decision.ALLOW, Decision.RESTRICT, Decision.DENY]

PENDING_RATIONALE = "Evaluating access request..."
CONNECTIVITY_FAILURE_RATIONALE = "Error: Could not connect to the Backend Decision Engine."


def location_class_for(label: str) -> LocationClass:
    """
    Projects a location label onto its classification token,
    e.g. "Internal_IP (Hospital)" -> "Internal_IP".
    """
    return LocationClass(label.strip().split(" ")[0])


class AccessRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Role
    location_class: LocationClass = Field(alias="location")
    time_of_day: TimeOfDay = Field(alias="time")
    purpose: str
    emergency_override: bool = Field(default=False, alias="emergency")
    justification: str = ""

    @model_validator(mode="after")
    def check_break_glass(self):
        if self.emergency_override and not self.justification.strip():
            raise ValueError("Emergency access requires a justification")
        if not self.emergency_override and self.justification:
            raise ValueError("A justification is only sent with emergency access")
        return self

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class DecisionResponse(BaseModel):
    decision: Decision
    log: str

    @field_validator("decision", mode="before")
    @classmethod
    def check_decision(cls, value):
        # PENDING is a client-side state, never a valid answer
        if value not in [decision.value for decision in RESOLVED_DECISIONS]:
            raise UnrecognizedDecisionError(value)
        return value


class DecisionOutcome(BaseModel):
    submission_id: int
    decision: Decision = Decision.PENDING
    rationale: str = PENDING_RATIONALE

    @property
    def is_pending(self) -> bool:
        return self.decision is Decision.PENDING

    def settle(self, decision: Decision, rationale: str):
        if not self.is_pending:
            raise RuntimeError(f"Submission {self.submission_id} has already been settled")
        self.decision = decision
        self.rationale = rationale
