"""Tests for RequestBuilder and the AccessRequest break-glass invariant.

Covers:
- Location label is projected onto its classification token
- Justification is dropped for non-emergency requests, even if left in the form
- Emergency without justification cannot be built
- Building does not clear the form
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from medtrust.core.exceptions import IncompleteRequestError
from medtrust.schemas.access_schemas import (
    AccessRequest,
    LocationClass,
    Role,
    TimeOfDay,
    location_class_for,
)
from medtrust.services.request_builder import RequestBuilder


class TestLocationProjection:
    def test_internal_label_strips_suffix(self):
        assert location_class_for("Internal_IP (Hospital)") is LocationClass.INTERNAL

    def test_external_label_strips_suffix(self):
        assert location_class_for("External_IP (Home/Public)") is LocationClass.EXTERNAL

    def test_unknown_label_rejected(self):
        with pytest.raises(ValueError):
            location_class_for("Satellite (Orbit)")

    def test_payload_carries_token_only(self):
        builder = RequestBuilder(location="Internal_IP (Hospital)")
        payload = builder.build().to_payload()
        assert payload["location"] == "Internal_IP"


class TestBuild:
    def test_default_form_builds(self):
        request = RequestBuilder().build()
        assert request.role is Role.DOCTOR
        assert request.time_of_day is TimeOfDay.DAYTIME
        assert request.purpose == "Patient_A_Record"
        assert request.emergency_override is False
        assert request.justification == ""

    def test_payload_shape(self):
        builder = RequestBuilder(role="Nurse", location="External_IP (Home/Public)",
                                 time=TimeOfDay.NIGHTTIME, purpose="Patient_B_Record")
        assert builder.build().to_payload() == {
            "role": "Nurse",
            "location": "External_IP",
            "time": "Nighttime",
            "purpose": "Patient_B_Record",
            "emergency": False,
            "justification": "",
        }

    def test_leftover_justification_not_sent(self):
        builder = RequestBuilder(emergency=True, justification="Cardiac arrest in ER")
        assert builder.build().justification == "Cardiac arrest in ER"

        builder.emergency = False
        payload = builder.build().to_payload()
        assert payload["emergency"] is False
        assert payload["justification"] == ""

    def test_emergency_without_justification_blocked(self):
        builder = RequestBuilder(emergency=True)
        assert builder.can_submit is False
        with pytest.raises(IncompleteRequestError):
            builder.build()

    def test_whitespace_justification_blocked(self):
        builder = RequestBuilder(emergency=True, justification="   ")
        assert builder.can_submit is False

    def test_build_does_not_clear_form(self):
        builder = RequestBuilder(role="Admin", emergency=True, justification="Mass casualty event")
        first = builder.build()
        second = builder.build()
        assert first == second
        assert builder.justification == "Mass casualty event"
        assert builder.role == "Admin"


class TestAccessRequestInvariant:
    def test_emergency_requires_justification(self):
        with pytest.raises(ValidationError):
            AccessRequest(role="Doctor", location="Internal_IP", time="Daytime",
                          purpose="Patient_A_Record", emergency=True, justification="")

    def test_non_emergency_rejects_justification(self):
        with pytest.raises(ValidationError):
            AccessRequest(role="Doctor", location="Internal_IP", time="Daytime",
                          purpose="Patient_A_Record", emergency=False, justification="just looking")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            AccessRequest(role="Janitor", location="Internal_IP", time="Daytime", purpose="x")

    def test_request_is_immutable(self):
        request = RequestBuilder().build()
        with pytest.raises(ValidationError):
            request.purpose = "Patient_Z_Record"
