"""Idempotent upsert of validation and alias records into cross-account zones."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from botocore.exceptions import ClientError

from .errors import ZoneNotFoundWarning
from .models import AliasTarget, DesiredRecord, DNSChange, HostedZone, Outcome, ValidationRecord
from .zones import find_zone_id, list_hosted_zones


logger = logging.getLogger(__name__)


def validation_records_to_desired(records: Iterable[ValidationRecord], ttl: int) -> List[DesiredRecord]:
    """One record per ACM validation option; shared CNAMEs are dropped later by plan_changes."""
    return [
        DesiredRecord(
            domain=record.domain,
            record_name=record.record_name,
            record_type=record.record_type,
            ttl=ttl,
            values=(record.record_value,),
        )
        for record in records
    ]


def alias_records_for(
    domains: Iterable[str],
    target: str,
    alias_zone_id: str,
    ipv6: bool = False,
) -> List[DesiredRecord]:
    record_types = ("A", "AAAA") if ipv6 else ("A",)
    alias = AliasTarget(hosted_zone_id=alias_zone_id, dns_name=target)
    return [
        DesiredRecord(domain=domain, record_name=domain, record_type=record_type, alias=alias)
        for domain in domains
        for record_type in record_types
    ]


def plan_changes(zones: Sequence[HostedZone], records: Iterable[DesiredRecord]) -> Outcome[List[DNSChange]]:
    changes: List[DNSChange] = []
    outcome: Outcome[List[DNSChange]] = Outcome(value=changes)
    seen = set()

    for record in records:
        zone_id = find_zone_id(zones, record.domain)
        if zone_id is None:
            message = f"Hosted zone not found for domain: {record.domain}. Please update DNS manually."
            logger.warning(message)
            outcome.warnings.append(ZoneNotFoundWarning(message, domain=record.domain))
            continue

        change = DNSChange(
            hosted_zone_id=zone_id,
            record_name=record.record_name,
            record_type=record.record_type,
            ttl=record.ttl,
            values=record.values,
            alias=record.alias,
        )
        key = (zone_id, change.record_name.lower().rstrip("."), change.record_type)
        if key in seen:
            continue
        seen.add(key)
        logger.info("Hosted zone ID for %s: %s", record.domain, zone_id)
        changes.append(change)

    return outcome


def upsert_records(
    route53_client: Any,
    records: Iterable[DesiredRecord],
    comment: Optional[str] = None,
) -> Outcome[List[DNSChange]]:
    """
    UPSERT every record whose zone can be resolved, one change batch per zone.

    Records without a zone are skipped and reported as ZoneNotFoundWarning.
    The outcome value lists the changes that were applied.
    """

    zones = list_hosted_zones(route53_client)
    planned = plan_changes(zones, records)

    batches: Dict[str, List[DNSChange]] = {}
    for change in planned.value:
        batches.setdefault(change.hosted_zone_id, []).append(change)

    for zone_id, changes in batches.items():
        try:
            route53_client.change_resource_record_sets(
                HostedZoneId=zone_id,
                ChangeBatch={
                    "Comment": comment or "Managed by cross-account certificate automation",
                    "Changes": [change.to_change() for change in changes],
                },
            )
        except ClientError:
            logger.exception(
                "Upserting %s in zone %s failed",
                ", ".join(change.record_name for change in changes),
                zone_id,
            )
            raise
        for change in changes:
            logger.info("%s record created/updated: %s", change.record_type, change.record_name)

    return planned
