"""Hosted zone lookup in the DNS account."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .models import HostedZone


logger = logging.getLogger(__name__)

_ID_PREFIX = "/hostedzone/"


def _normalize(name: str) -> str:
    return name.strip().lower().rstrip(".") + "."


def list_hosted_zones(route53_client: Any) -> List[HostedZone]:
    """Fetch every zone visible to the client, across all result pages."""

    zones: List[HostedZone] = []
    paginator = route53_client.get_paginator("list_hosted_zones")
    for page in paginator.paginate():
        for zone in page.get("HostedZones", []):
            zone_id = zone["Id"]
            if zone_id.startswith(_ID_PREFIX):
                zone_id = zone_id[len(_ID_PREFIX):]
            zones.append(HostedZone(id=zone_id, name=zone["Name"]))
    logger.info("Found %d hosted zones", len(zones))
    return zones


def find_zone_id(zones: Iterable[HostedZone], domain: str) -> Optional[str]:
    """
    Return the id of the most specific zone owning `domain`, or None.

    Matching happens on label boundaries, so `example.com.` owns
    `dev.example.com` but not `badexample.com`. With nested zones the
    longest zone name wins regardless of listing order.
    """

    target = _normalize(domain)
    best: Optional[HostedZone] = None
    for zone in zones:
        zone_name = _normalize(zone.name)
        if target != zone_name and not target.endswith("." + zone_name):
            continue
        if best is None or len(zone_name) > len(_normalize(best.name)):
            best = zone
    return best.id if best else None
