"""Error and warning types raised or collected by the custom resource handlers."""

from __future__ import annotations

from typing import Optional


class CertificateAutomationError(Exception):
    """Base class for fatal failures. Carries where in the flow it happened."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        domain: Optional[str] = None,
        arn: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.domain = domain
        self.arn = arn

    def __str__(self) -> str:
        details = [
            f"{label}={value}"
            for label, value in (("stage", self.stage), ("domain", self.domain), ("arn", self.arn))
            if value
        ]
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"


class AuthorizationError(CertificateAutomationError):
    """Role assumption was denied or returned incomplete credentials."""


class ValidationTimeoutError(CertificateAutomationError):
    """A polling loop ran out of budget before ACM reached the wanted state."""


class CertificateIssuanceError(CertificateAutomationError):
    """ACM moved the certificate to a terminal state other than ISSUED."""


class UnsupportedRequestTypeError(CertificateAutomationError):
    pass


class InvalidResourcePropertiesError(CertificateAutomationError):
    pass


class CertificateAutomationWarning(Warning):
    """Base class for non-fatal problems. Collected on results, never raised."""

    def __init__(self, message: str, **context: str):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ZoneNotFoundWarning(CertificateAutomationWarning):
    """No visible hosted zone owns a domain; its record was skipped."""


class BestEffortCleanupFailure(CertificateAutomationWarning):
    """The replaced certificate could not be deleted and is left orphaned."""
