"""AWS Lambda entry points for the certificate and alias-record custom resources."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Optional

from cross_account_certs import InvocationContext, load_settings
from cross_account_certs import cfn_response
from cross_account_certs.dispatcher import handle_alias_event, handle_certificate_event
from cross_account_certs.models import HandlerResult


logger = logging.getLogger()


def _run(
    handle: Callable[[Dict[str, Any], InvocationContext], HandlerResult],
    event: Dict[str, Any],
    context: Any,
    region: Optional[str],
) -> Optional[Dict[str, Any]]:
    settings = load_settings(os.environ)
    logger.setLevel(settings.log_level.upper())
    logger.info("Event: %s", json.dumps({k: v for k, v in event.items() if k != "ResponseURL"}, default=str))

    try:
        ctx = InvocationContext.create(region, settings, context)
        result = handle(event, ctx)
    except Exception as exc:
        logger.exception("Error managing certificate or DNS records")
        if event.get("ResponseURL"):
            cfn_response.send(
                event,
                context,
                cfn_response.FAILED,
                reason=str(exc),
                timeout=settings.response_timeout_seconds,
            )
        raise

    if event.get("ResponseURL"):
        cfn_response.send(
            event,
            context,
            cfn_response.SUCCESS,
            physical_resource_id=result.physical_resource_id,
            data=result.data,
            timeout=settings.response_timeout_seconds,
        )
    return result.to_response()


def certificate_handler(event: Dict[str, Any], context: Any) -> Optional[Dict[str, Any]]:
    """
    Certificate custom resource.

    ResourceProperties: DomainName, SubjectAlternativeNames (optional),
    CrossAccountRoleArn, CloudfrontCertificateRegion.
    Returns {"PhysicalResourceId": <certificate arn>, "Data": {"CertificateArn": ...}}.
    """

    region = (event.get("ResourceProperties") or {}).get("CloudfrontCertificateRegion")
    return _run(handle_certificate_event, event, context, region)


def alias_records_handler(event: Dict[str, Any], context: Any) -> Optional[Dict[str, Any]]:
    """
    Alias-record custom resource.

    ResourceProperties: DomainName, SubjectAlternativeNames (optional),
    CrossAccountRoleArn, CloudfrontURL, Ipv6Enabled (optional).
    """

    return _run(handle_alias_event, event, context, None)


lambda_handler = certificate_handler


if __name__ == "__main__":
    # Allow local execution for debugging
    sample_event = json.loads(os.environ.get("SAMPLE_EVENT", "{}") or "{}")
    print(json.dumps(certificate_handler(sample_event, None), indent=2))
