from conftest import FakeRoute53

from cross_account_certs.errors import ZoneNotFoundWarning
from cross_account_certs.models import HostedZone, ValidationRecord
from cross_account_certs.records import (
    alias_records_for,
    plan_changes,
    upsert_records,
    validation_records_to_desired,
)


def _validation(domain, base=None):
    base = base or domain
    return ValidationRecord(
        domain=domain,
        record_name=f"_token.{base}.",
        record_type="CNAME",
        record_value=f"_value.{base}.acm-validations.aws.",
    )


def test_upserts_validation_cname_into_owning_zone():
    client = FakeRoute53()
    records = validation_records_to_desired([_validation("dev.example.com")], ttl=300)

    outcome = upsert_records(client, records)

    assert len(outcome.value) == 1
    assert outcome.warnings == []
    call = client.change_calls[0]
    assert call["HostedZoneId"] == "ZEXAMPLE"
    assert call["ChangeBatch"]["Changes"] == [
        {
            "Action": "UPSERT",
            "ResourceRecordSet": {
                "Name": "_token.dev.example.com.",
                "Type": "CNAME",
                "TTL": 300,
                "ResourceRecords": [{"Value": "_value.dev.example.com.acm-validations.aws."}],
            },
        }
    ]


def test_applying_twice_leaves_the_same_record_sets():
    client = FakeRoute53()
    records = validation_records_to_desired([_validation("dev.example.com"), _validation("www.example.com")], ttl=300)

    upsert_records(client, records)
    after_first = dict(client.record_sets)
    upsert_records(client, records)

    assert client.record_sets == after_first
    assert len(client.record_sets) == 2


def test_unresolvable_domain_is_skipped_with_warning():
    client = FakeRoute53()
    records = validation_records_to_desired([_validation("dev.example.com"), _validation("shop.example.org")], ttl=300)

    outcome = upsert_records(client, records)

    assert [change.record_name for change in outcome.value] == ["_token.dev.example.com."]
    assert len(outcome.warnings) == 1
    assert isinstance(outcome.warnings[0], ZoneNotFoundWarning)
    assert outcome.warnings[0].context["domain"] == "shop.example.org"


def test_shared_wildcard_validation_record_is_sent_once():
    zones = [HostedZone(id="Z1", name="example.com.")]
    records = validation_records_to_desired(
        [_validation("example.com"), _validation("*.example.com", base="example.com")], ttl=300
    )

    outcome = plan_changes(zones, records)

    assert len(outcome.value) == 1


def test_records_are_batched_per_zone():
    client = FakeRoute53(
        zones=[
            {"Id": "/hostedzone/Z1", "Name": "example.com."},
            {"Id": "/hostedzone/Z2", "Name": "example.net."},
        ]
    )
    records = validation_records_to_desired(
        [_validation("a.example.com"), _validation("b.example.com"), _validation("example.net")], ttl=60
    )

    upsert_records(client, records)

    assert [(call["HostedZoneId"], len(call["ChangeBatch"]["Changes"])) for call in client.change_calls] == [
        ("Z1", 2),
        ("Z2", 1),
    ]


def test_alias_records_point_at_cloudfront_zone():
    records = alias_records_for(["example.com", "www.example.com"], "d111.cloudfront.net", "Z2FDTNDATAQYW2", ipv6=True)
    zones = [HostedZone(id="Z1", name="example.com.")]

    changes = plan_changes(zones, records).value

    assert [(change.record_name, change.record_type) for change in changes] == [
        ("example.com", "A"),
        ("example.com", "AAAA"),
        ("www.example.com", "A"),
        ("www.example.com", "AAAA"),
    ]
    assert changes[0].to_change() == {
        "Action": "UPSERT",
        "ResourceRecordSet": {
            "Name": "example.com",
            "Type": "A",
            "AliasTarget": {
                "HostedZoneId": "Z2FDTNDATAQYW2",
                "DNSName": "d111.cloudfront.net",
                "EvaluateTargetHealth": False,
            },
        },
    }


def test_alias_records_default_to_ipv4_only():
    records = alias_records_for(["example.com"], "d111.cloudfront.net", "Z2FDTNDATAQYW2")

    assert [record.record_type for record in records] == ["A"]
