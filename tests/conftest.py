import pytest
from botocore.exceptions import ClientError

from cross_account_certs import HandlerSettings, InvocationContext


ROLE_ARN = "arn:aws:iam::111111111111:role/Route53CrossAccountRole"


def client_error(code, operation, message="boom"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeClock:
    def __init__(self):
        self.current = 0.0
        self.sleeps = []

    def now(self):
        return self.current

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.current += seconds


class FakeAcm:
    """
    Each describe_certificate call returns the next entry of `statuses`
    (the last one repeats). Validation options stay empty for the first
    `pending_option_polls` describes of a certificate.
    """

    def __init__(self, statuses=("PENDING_VALIDATION", "ISSUED"), pending_option_polls=0, delete_error=None):
        self.statuses = list(statuses)
        self.pending_option_polls = pending_option_polls
        self.delete_error = delete_error
        self.requests = []
        self.deleted = []
        self.describe_calls = {}
        self.domains = {}

    def request_certificate(self, **kwargs):
        self.requests.append(kwargs)
        arn = f"arn:aws:acm:us-east-1:222222222222:certificate/cert-{len(self.requests)}"
        self.domains[arn] = [kwargs["DomainName"], *kwargs.get("SubjectAlternativeNames", [])]
        return {"CertificateArn": arn}

    def describe_certificate(self, CertificateArn):
        count = self.describe_calls.get(CertificateArn, 0) + 1
        self.describe_calls[CertificateArn] = count

        options = []
        for domain in self.domains.get(CertificateArn, []):
            option = {"DomainName": domain, "ValidationStatus": "PENDING_VALIDATION"}
            if count > self.pending_option_polls:
                base = domain[2:] if domain.startswith("*.") else domain
                option["ResourceRecord"] = {
                    "Name": f"_token.{base}.",
                    "Type": "CNAME",
                    "Value": f"_value.{base}.acm-validations.aws.",
                }
            options.append(option)

        status = self.statuses[min(count - 1, len(self.statuses) - 1)]
        return {
            "Certificate": {
                "CertificateArn": CertificateArn,
                "Status": status,
                "DomainValidationOptions": options,
                "FailureReason": "CAA_ERROR" if status == "FAILED" else None,
            }
        }

    def delete_certificate(self, CertificateArn):
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(CertificateArn)


class FakePaginator:
    def __init__(self, zones, page_size):
        self.zones = zones
        self.page_size = page_size

    def paginate(self):
        for start in range(0, len(self.zones), self.page_size):
            yield {"HostedZones": self.zones[start:start + self.page_size]}


class FakeRoute53:
    def __init__(self, zones=None, page_size=100):
        if zones is None:
            zones = [{"Id": "/hostedzone/ZEXAMPLE", "Name": "example.com."}]
        self.zones = zones
        self.page_size = page_size
        self.change_calls = []
        self.record_sets = {}

    def get_paginator(self, operation):
        assert operation == "list_hosted_zones"
        return FakePaginator(self.zones, self.page_size)

    def change_resource_record_sets(self, HostedZoneId, ChangeBatch):
        self.change_calls.append({"HostedZoneId": HostedZoneId, "ChangeBatch": ChangeBatch})
        for change in ChangeBatch["Changes"]:
            assert change["Action"] == "UPSERT"
            record_set = change["ResourceRecordSet"]
            self.record_sets[(HostedZoneId, record_set["Name"], record_set["Type"])] = record_set
        return {"ChangeInfo": {"Id": f"/change/C{len(self.change_calls)}", "Status": "PENDING"}}


class FakeSts:
    def __init__(self, credentials=None, error=None):
        if credentials is None:
            credentials = {"AccessKeyId": "AKIA", "SecretAccessKey": "secret", "SessionToken": "token"}
        self.credentials = credentials
        self.error = error
        self.calls = []

    def assume_role(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"Credentials": self.credentials}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def acm():
    return FakeAcm()


@pytest.fixture
def route53():
    return FakeRoute53()


@pytest.fixture
def sts():
    return FakeSts()


@pytest.fixture
def ctx(acm, sts, route53, clock):
    def client_factory(service, **kwargs):
        assert service == "route53"
        return route53

    return InvocationContext(
        acm=acm,
        sts=sts,
        settings=HandlerSettings(),
        clock=clock,
        client_factory=client_factory,
    )


def certificate_event(request_type="Create", domain="dev.example.com", alternates=None, **extra):
    properties = {
        "DomainName": domain,
        "CrossAccountRoleArn": ROLE_ARN,
        "CloudfrontCertificateRegion": "us-east-1",
    }
    if alternates is not None:
        properties["SubjectAlternativeNames"] = alternates
    event = {"RequestType": request_type, "ResourceProperties": properties}
    event.update(extra)
    return event
