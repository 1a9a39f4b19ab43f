"""
ACM certificate lifecycle behind the certificate custom resource.

Create requests a DNS-validated certificate, writes its validation CNAMEs
into the DNS account, and waits for issuance. Update replaces the certificate
only when the set of names changes. Delete removes it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .context import InvocationContext
from .errors import BestEffortCleanupFailure, CertificateIssuanceError
from .models import Certificate, HandlerResult, ResourceProperties, ValidationRecord
from .polling import wait_for
from .records import upsert_records, validation_records_to_desired


logger = logging.getLogger(__name__)

ISSUED = "ISSUED"
TERMINAL_FAILURE_STATUSES = ("FAILED", "VALIDATION_TIMED_OUT", "REVOKED", "EXPIRED", "INACTIVE")


def is_certificate_arn(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("arn:") and ":acm:" in value


def domains_changed(current: ResourceProperties, previous: Optional[ResourceProperties]) -> bool:
    if previous is None:
        return True
    return current.domain_set() != previous.domain_set()


@contextmanager
def _aws_call(stage: str, domain: Optional[str] = None, arn: Optional[str] = None) -> Iterator[None]:
    try:
        yield
    except ClientError:
        logger.exception("ACM call failed (stage=%s, domain=%s, arn=%s)", stage, domain, arn)
        raise


class CertificateManager:
    def __init__(self, ctx: InvocationContext):
        self.ctx = ctx
        self.acm = ctx.acm
        self.settings = ctx.settings

    def request_certificate(self, properties: ResourceProperties, idempotency_token: Optional[str] = None) -> str:
        params = {"DomainName": properties.domain_name, "ValidationMethod": "DNS"}
        if properties.alternate_names:
            params["SubjectAlternativeNames"] = list(properties.alternate_names)
        if idempotency_token:
            params["IdempotencyToken"] = idempotency_token

        with _aws_call("request-certificate", domain=properties.domain_name):
            arn = self.acm.request_certificate(**params)["CertificateArn"]
        logger.info("Requested certificate %s for %s", arn, ", ".join(properties.domains))
        return arn

    def describe(self, arn: str) -> Certificate:
        with _aws_call("describe-certificate", arn=arn):
            description = self.acm.describe_certificate(CertificateArn=arn)["Certificate"]
        return Certificate.from_description(description)

    def wait_for_validation_records(self, arn: str) -> List[ValidationRecord]:
        """ACM fills in validation options asynchronously after the request."""

        def probe() -> Optional[List[ValidationRecord]]:
            records = list(self.describe(arn).validation_records)
            logger.info("Validation options: %s", records)
            if records and all(record.ready for record in records):
                return records
            return None

        return wait_for(
            probe,
            clock=self.ctx.clock,
            timeout=self.settings.validation_options_timeout_seconds,
            interval=self.settings.validation_options_poll_interval_seconds,
            stage="validation-options",
            arn=arn,
        )

    def wait_for_issuance(self, arn: str) -> str:
        def probe() -> Optional[str]:
            certificate = self.describe(arn)
            if certificate.status == ISSUED:
                logger.info("Certificate %s has been issued.", arn)
                return certificate.status
            if certificate.status in TERMINAL_FAILURE_STATUSES:
                raise CertificateIssuanceError(
                    f"Certificate ended in {certificate.status}: {certificate.failure_reason or 'no reason given'}",
                    stage="issuance",
                    arn=arn,
                )
            logger.info("Certificate status: %s", certificate.status)
            return None

        return wait_for(
            probe,
            clock=self.ctx.clock,
            timeout=self.ctx.issuance_budget(),
            interval=self.settings.issuance_poll_interval_seconds,
            stage="issuance",
            arn=arn,
        )

    def issue(self, properties: ResourceProperties, idempotency_token: Optional[str] = None) -> HandlerResult:
        """Request, validate through the DNS account, and wait for ISSUED."""

        arn = self.request_certificate(properties, idempotency_token)
        records = self.wait_for_validation_records(arn)

        route53 = self.ctx.route53_for(properties.cross_account_role_arn)
        applied = upsert_records(
            route53,
            validation_records_to_desired(records, self.settings.validation_record_ttl),
            comment=f"ACM certificate validation records for {arn}",
        )

        status = self.wait_for_issuance(arn)
        return HandlerResult(
            physical_resource_id=arn,
            data={"CertificateArn": arn, "OldCertificateArn": "N/A", "CertificateStatus": status},
            warnings=list(applied.warnings),
        )

    def create(self, properties: ResourceProperties, idempotency_token: Optional[str] = None) -> HandlerResult:
        return self.issue(properties, idempotency_token)

    def update(
        self,
        properties: ResourceProperties,
        previous: Optional[ResourceProperties],
        physical_resource_id: Optional[str],
        idempotency_token: Optional[str] = None,
    ) -> HandlerResult:
        if not domains_changed(properties, previous) and physical_resource_id:
            logger.info("No changes to domain or SubjectAlternativeNames. Keeping the existing certificate.")
            return HandlerResult(
                physical_resource_id=physical_resource_id,
                data={"CertificateArn": physical_resource_id, "OldCertificateArn": "N/A"},
            )

        logger.info("Domain or SubjectAlternativeNames changed. Requesting a new certificate.")
        result = self.issue(properties, idempotency_token)
        if is_certificate_arn(physical_resource_id):
            result.data["OldCertificateArn"] = physical_resource_id
            warning = self.delete_replaced(physical_resource_id)
            if warning:
                result.warnings.append(warning)
        return result

    def delete_replaced(self, arn: str) -> Optional[BestEffortCleanupFailure]:
        try:
            self.ctx.acm_for(arn).delete_certificate(CertificateArn=arn)
        except (ClientError, BotoCoreError) as exc:
            message = f"Error deleting old certificate {arn}: {exc}"
            logger.warning(message)
            return BestEffortCleanupFailure(message, arn=arn)
        logger.info("Old certificate %s has been deleted.", arn)
        return None

    def delete(self, physical_resource_id: Optional[str]) -> HandlerResult:
        if not is_certificate_arn(physical_resource_id):
            logger.info("%s is not a certificate ARN, nothing to delete", physical_resource_id)
            return HandlerResult(physical_resource_id=physical_resource_id or "")

        try:
            self.ctx.acm_for(physical_resource_id).delete_certificate(CertificateArn=physical_resource_id)
        except ClientError as exc:
            # A replacing Update already removed it; cleanup then asks again.
            if exc.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
                logger.exception("ACM call failed (stage=delete-certificate, arn=%s)", physical_resource_id)
                raise
            logger.info("Certificate %s was already deleted", physical_resource_id)
            return HandlerResult(physical_resource_id=physical_resource_id)
        logger.info("Deleted certificate %s", physical_resource_id)
        return HandlerResult(physical_resource_id=physical_resource_id)
