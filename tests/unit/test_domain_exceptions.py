"""Tests for domain exceptions (error_code, message, details)."""

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConditionsNotMetException,
    DealClarityException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)
from app.infrastructure.exceptions import MailDeliveryError


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = DealClarityException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "DealClarityException"
    assert exc.details == {}


def test_to_dict_shape() -> None:
    exc = DealClarityException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("Workflow", "wf-1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.message == "Workflow not found: wf-1"
    assert exc.details == {"resource_type": "Workflow", "resource_id": "wf-1"}


def test_authorization_names_resource_and_team() -> None:
    exc = AuthorizationException("workflow", "team-x")
    assert exc.error_code == "AUTHORIZATION_ERROR"
    assert "another team" in exc.message
    assert exc.details == {"resource": "workflow", "team_id": "team-x"}


def test_validation_field_detail() -> None:
    exc = ValidationException("bad amount", field="amount")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "amount"}


def test_conditions_not_met() -> None:
    exc = ConditionsNotMetException("wf-1", "deal-1")
    assert exc.error_code == "CONDITIONS_NOT_MET"
    assert exc.details == {"workflow_id": "wf-1", "record_id": "deal-1"}


def test_codes_of_remaining_exceptions() -> None:
    assert AuthenticationException().error_code == "AUTHENTICATION_ERROR"
    assert SqlNotConfiguredException().error_code == "SERVICE_UNAVAILABLE"
    mail = MailDeliveryError("a@b.test", "timeout")
    assert mail.error_code == "MAIL_DELIVERY_ERROR"
    assert isinstance(mail, DealClarityException)
