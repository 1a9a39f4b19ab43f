"""Data types shared by the certificate and DNS record handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Generic, List, Optional, Tuple, TypeVar

from .errors import CertificateAutomationWarning, InvalidResourcePropertiesError


REQUEST_TYPES = ("Create", "Update", "Delete")

T = TypeVar("T")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ResourceProperties:
    domain_name: str
    alternate_names: Tuple[str, ...] = ()
    cross_account_role_arn: str = ""
    certificate_region: Optional[str] = None
    cdn_target: Optional[str] = None
    ipv6_enabled: bool = False

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "ResourceProperties":
        payload = payload or {}
        domain_name = str(payload.get("DomainName") or "").strip()
        if not domain_name:
            raise InvalidResourcePropertiesError("DomainName is required", stage="parse-properties")

        seen = {domain_name.lower()}
        alternates: List[str] = []
        for name in payload.get("SubjectAlternativeNames") or []:
            name = str(name).strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                alternates.append(name)

        return cls(
            domain_name=domain_name,
            alternate_names=tuple(alternates),
            cross_account_role_arn=str(payload.get("CrossAccountRoleArn") or "").strip(),
            certificate_region=payload.get("CloudfrontCertificateRegion") or None,
            cdn_target=payload.get("CloudfrontURL") or None,
            ipv6_enabled=_as_bool(payload.get("Ipv6Enabled", False)),
        )

    @property
    def domains(self) -> List[str]:
        return [self.domain_name, *self.alternate_names]

    def domain_set(self) -> FrozenSet[str]:
        """Domains compared without regard to order or case."""
        return frozenset(name.lower().rstrip(".") for name in self.domains)


@dataclass(frozen=True)
class LifecycleEvent:
    request_type: str
    current: ResourceProperties
    previous: Optional[ResourceProperties] = None
    physical_resource_id: Optional[str] = None
    request_id: Optional[str] = None
    stack_id: Optional[str] = None
    logical_resource_id: Optional[str] = None
    response_url: Optional[str] = None

    @classmethod
    def from_dict(cls, event: Dict[str, Any]) -> "LifecycleEvent":
        request_type = event.get("RequestType")
        old_properties = event.get("OldResourceProperties")
        previous = None
        if request_type == "Update" and old_properties:
            previous = ResourceProperties.from_dict(old_properties)
        return cls(
            request_type=request_type,
            current=ResourceProperties.from_dict(event.get("ResourceProperties")),
            previous=previous,
            physical_resource_id=event.get("PhysicalResourceId"),
            request_id=event.get("RequestId"),
            stack_id=event.get("StackId"),
            logical_resource_id=event.get("LogicalResourceId"),
            response_url=event.get("ResponseURL"),
        )


@dataclass(frozen=True)
class ValidationRecord:
    domain: str
    record_name: Optional[str] = None
    record_type: Optional[str] = None
    record_value: Optional[str] = None

    @property
    def ready(self) -> bool:
        return bool(self.record_name and self.record_type and self.record_value)


@dataclass(frozen=True)
class Certificate:
    arn: str
    status: str
    validation_records: Tuple[ValidationRecord, ...] = ()
    failure_reason: Optional[str] = None

    @classmethod
    def from_description(cls, description: Dict[str, Any]) -> "Certificate":
        records = []
        for option in description.get("DomainValidationOptions") or []:
            resource_record = option.get("ResourceRecord") or {}
            records.append(
                ValidationRecord(
                    domain=option.get("DomainName", ""),
                    record_name=resource_record.get("Name"),
                    record_type=resource_record.get("Type"),
                    record_value=resource_record.get("Value"),
                )
            )
        return cls(
            arn=description["CertificateArn"],
            status=description.get("Status", "UNKNOWN"),
            validation_records=tuple(records),
            failure_reason=description.get("FailureReason"),
        )


@dataclass(frozen=True)
class HostedZone:
    id: str
    name: str


@dataclass(frozen=True)
class AliasTarget:
    hosted_zone_id: str
    dns_name: str
    evaluate_target_health: bool = False


@dataclass(frozen=True)
class DesiredRecord:
    """A record to upsert; `domain` selects the hosted zone that owns it."""

    domain: str
    record_name: str
    record_type: str
    ttl: Optional[int] = None
    values: Tuple[str, ...] = ()
    alias: Optional[AliasTarget] = None


@dataclass(frozen=True)
class DNSChange:
    hosted_zone_id: str
    record_name: str
    record_type: str
    ttl: Optional[int] = None
    values: Tuple[str, ...] = ()
    alias: Optional[AliasTarget] = None

    def to_change(self) -> Dict[str, Any]:
        record_set: Dict[str, Any] = {"Name": self.record_name, "Type": self.record_type}
        if self.alias:
            record_set["AliasTarget"] = {
                "HostedZoneId": self.alias.hosted_zone_id,
                "DNSName": self.alias.dns_name,
                "EvaluateTargetHealth": self.alias.evaluate_target_health,
            }
        else:
            record_set["TTL"] = self.ttl
            record_set["ResourceRecords"] = [{"Value": value} for value in self.values]
        return {"Action": "UPSERT", "ResourceRecordSet": record_set}


@dataclass
class Outcome(Generic[T]):
    """A primary value plus the non-fatal problems met while producing it."""

    value: T
    warnings: List[CertificateAutomationWarning] = field(default_factory=list)


@dataclass
class HandlerResult:
    physical_resource_id: str
    data: Dict[str, str] = field(default_factory=dict)
    warnings: List[CertificateAutomationWarning] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {"PhysicalResourceId": self.physical_resource_id}
        if self.data:
            response["Data"] = dict(self.data)
        return response
