from typing import Optional

from medtrust.core.config import settings
from medtrust.core.exceptions import IncompleteRequestError
from medtrust.schemas.access_schemas import (
    AccessRequest,
    LOCATIONS,
    ROLES,
    TimeOfDay,
    location_class_for,
)

class RequestBuilder:
    """
    Mutable form state for an access request.
    build() does not clear the form, so the same attributes can be resubmitted.
    """

    def __init__(self, role: str = ROLES[0], location: str = LOCATIONS[0],
                 time: TimeOfDay = TimeOfDay.DAYTIME, purpose: Optional[str] = None,
                 emergency: bool = False, justification: str = ""):
        self.role = role
        self.location = location
        self.time = TimeOfDay(time)
        self.purpose = purpose if purpose is not None else settings.DEFAULT_PURPOSE
        self.emergency = emergency
        self.justification = justification

    @property
    def can_submit(self) -> bool:
        return not self.emergency or bool(self.justification.strip())

    def build(self) -> AccessRequest:
        if not self.can_submit:
            raise IncompleteRequestError("A justification is required for emergency (break-glass) access")

        return AccessRequest(
            role=self.role,
            location=location_class_for(self.location),
            time=self.time,
            purpose=self.purpose,
            emergency=self.emergency,
            # Leftover text from an earlier emergency request is never sent
            justification=self.justification if self.emergency else "",
        )
