"""Per-invocation collaborators handed to every component by parameter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import boto3

from .config import HandlerSettings
from .credentials import assume_role
from .polling import Clock


@dataclass
class InvocationContext:
    acm: Any
    sts: Any
    settings: HandlerSettings = field(default_factory=HandlerSettings)
    clock: Clock = field(default_factory=Clock)
    client_factory: Callable[..., Any] = boto3.client
    remaining_time_ms: Optional[Callable[[], int]] = None
    region: Optional[str] = None

    @classmethod
    def create(
        cls,
        region: Optional[str],
        settings: HandlerSettings,
        lambda_context: Any = None,
    ) -> "InvocationContext":
        """Build fresh region-scoped clients; nothing survives the invocation."""
        return cls(
            acm=boto3.client("acm", region_name=region),
            sts=boto3.client("sts", region_name=region),
            settings=settings,
            remaining_time_ms=getattr(lambda_context, "get_remaining_time_in_millis", None),
            region=region,
        )

    def route53_for(self, role_arn: str) -> Any:
        return assume_role(self.sts, role_arn, self.settings.role_session_name, self.client_factory)

    def acm_for(self, arn: str) -> Any:
        """ACM client for the region embedded in `arn` (arn:aws:acm:<region>:...)."""
        parts = arn.split(":")
        arn_region = parts[3] if len(parts) > 3 else ""
        if not arn_region or self.region is None or arn_region == self.region:
            return self.acm
        return self.client_factory("acm", region_name=arn_region)

    def issuance_budget(self) -> float:
        """Configured issuance timeout, shortened to fit the Lambda's remaining time."""
        budget = float(self.settings.issuance_timeout_seconds)
        if self.remaining_time_ms is not None:
            available = self.remaining_time_ms() / 1000 - self.settings.remaining_time_margin_seconds
            budget = max(0.0, min(budget, available))
        return budget
