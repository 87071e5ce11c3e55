from typing import List, NamedTuple, Optional

import pandas as pd

from medtrust.schemas.access_schemas import Decision, DecisionOutcome
from medtrust.schemas.audit_schemas import AuditAction, AuditLogEntry

AUDIT_COLUMNS = ["who", "role", "action", "timestamp", "resource", "context", "decision_reason"]

class DecisionBanner(NamedTuple):
    text: str
    background: str
    color: str

DECISION_BANNERS = {
    Decision.PENDING: DecisionBanner("Pending Check", "#e5e7eb", "#1f2937"),
    Decision.ALLOW: DecisionBanner("ACCESS GRANTED (LOW RISK)", "#dcfce7", "#15803d"),
    Decision.RESTRICT: DecisionBanner("ACCESS RESTRICTED (MEDIUM RISK)", "#fef9c3", "#a16207"),
    Decision.DENY: DecisionBanner("ACCESS DENIED (HIGH RISK)", "#fee2e2", "#b91c1c"),
}


def decision_banner(outcome: Optional[DecisionOutcome]) -> DecisionBanner:
    # Nothing submitted yet looks the same as an evaluation in flight
    if outcome is None:
        return DECISION_BANNERS[Decision.PENDING]
    return DECISION_BANNERS[outcome.decision]


def rationale_text(outcome: Optional[DecisionOutcome]) -> str:
    return outcome.rationale if outcome is not None else ""


def entries_to_frame(entries: List[AuditLogEntry]) -> pd.DataFrame:
    """Tabulates entries without reordering them."""
    rows = [entry.model_dump(mode="json") for entry in entries]
    return pd.DataFrame(rows, columns=AUDIT_COLUMNS)


def highlight_actions(val):
    color = 'green' if val == AuditAction.ACCESSED.value else 'red'
    return f'color: {color}; font-weight: bold'


def action_counts(entries: List[AuditLogEntry]) -> pd.DataFrame:
    frame = entries_to_frame(entries)
    counts = frame["action"].value_counts().reindex([a.value for a in AuditAction], fill_value=0)
    return counts.rename_axis("action").reset_index(name="count")


def denied_count(entries: List[AuditLogEntry]) -> int:
    return sum(1 for entry in entries if entry.was_denied)
