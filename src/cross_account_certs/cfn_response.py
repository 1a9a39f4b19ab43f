"""Report results to CloudFormation when invoked directly as a service token."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"
FAILED = "FAILED"


def build_body(
    event: Dict[str, Any],
    status: str,
    physical_resource_id: Optional[str],
    data: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    log_stream_name: Optional[str] = None,
) -> Dict[str, Any]:
    default_reason = f"See the details in CloudWatch Log Stream: {log_stream_name or 'unknown'}"
    return {
        "Status": status,
        "Reason": reason or default_reason,
        "PhysicalResourceId": physical_resource_id or event.get("PhysicalResourceId") or log_stream_name or "unknown",
        "StackId": event.get("StackId"),
        "RequestId": event.get("RequestId"),
        "LogicalResourceId": event.get("LogicalResourceId"),
        "Data": data or {},
    }


def send(
    event: Dict[str, Any],
    context: Any,
    status: str,
    physical_resource_id: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    timeout: int = 10,
) -> None:
    body = build_body(
        event,
        status,
        physical_resource_id,
        data=data,
        reason=reason,
        log_stream_name=getattr(context, "log_stream_name", None),
    )
    payload = json.dumps(body)
    logger.info("Sending %s response for %s", status, body["LogicalResourceId"])

    # The pre-signed S3 URL rejects any content type it was not signed with.
    response = requests.put(
        event["ResponseURL"],
        data=payload,
        headers={"content-type": "", "content-length": str(len(payload))},
        timeout=timeout,
    )
    response.raise_for_status()
