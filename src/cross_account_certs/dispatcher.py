"""Routes custom resource lifecycle events to the certificate or alias-record flow."""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Dict, Optional

from .certificates import CertificateManager
from .context import InvocationContext
from .errors import InvalidResourcePropertiesError, UnsupportedRequestTypeError
from .models import REQUEST_TYPES, HandlerResult, LifecycleEvent
from .records import alias_records_for, upsert_records


logger = logging.getLogger(__name__)


def check_request_type(event: Dict[str, Any]) -> str:
    request_type = event.get("RequestType")
    if request_type not in REQUEST_TYPES:
        raise UnsupportedRequestTypeError(f"Unsupported RequestType: {request_type!r}", stage="dispatch")
    return request_type


def idempotency_token(event: LifecycleEvent) -> Optional[str]:
    """Stable per CloudFormation request so retries reuse the same certificate."""
    if not (event.request_id and event.stack_id):
        return None
    return hashlib.md5((event.request_id + event.stack_id).encode("utf-8")).hexdigest()


def handle_certificate_event(event: Dict[str, Any], ctx: InvocationContext) -> HandlerResult:
    request_type = check_request_type(event)
    manager = CertificateManager(ctx)

    # Rollback deletes carry whatever properties the failed Create had.
    if request_type == "Delete":
        return manager.delete(event.get("PhysicalResourceId"))

    lifecycle = LifecycleEvent.from_dict(event)
    if lifecycle.request_type == "Create":
        result = manager.create(lifecycle.current, idempotency_token(lifecycle))
    else:
        result = manager.update(
            lifecycle.current,
            lifecycle.previous,
            lifecycle.physical_resource_id,
            idempotency_token(lifecycle),
        )

    for warning in result.warnings:
        logger.warning("%s: %s", type(warning).__name__, warning)
    logger.info("Certificate ARN: %s", result.physical_resource_id)
    return result


def handle_alias_event(event: Dict[str, Any], ctx: InvocationContext) -> HandlerResult:
    if check_request_type(event) == "Delete":
        logger.info("Delete request received. No action taken on DNS records.")
        raw_domain = (event.get("ResourceProperties") or {}).get("DomainName")
        return HandlerResult(physical_resource_id=event.get("PhysicalResourceId") or raw_domain or "")

    properties = LifecycleEvent.from_dict(event).current

    if not properties.cdn_target:
        raise InvalidResourcePropertiesError(
            "CloudfrontURL is required", stage="alias-records", domain=properties.domain_name
        )

    route53 = ctx.route53_for(properties.cross_account_role_arn)
    applied = upsert_records(
        route53,
        alias_records_for(
            properties.domains,
            properties.cdn_target,
            ctx.settings.cloudfront_hosted_zone_id,
            ipv6=properties.ipv6_enabled,
        ),
        comment=f"Alias records for {properties.cdn_target}",
    )

    created = []
    for change in applied.value:
        if change.record_name not in created:
            created.append(change.record_name)
    for warning in applied.warnings:
        logger.warning("%s: %s", type(warning).__name__, warning)

    return HandlerResult(
        physical_resource_id=properties.domain_name,
        data={"Message": f"DNS records created/updated for: {', '.join(created)}"},
        warnings=list(applied.warnings),
    )
