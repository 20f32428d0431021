#!/usr/bin/env python3
"""Alias records pointing the site hostnames at the distribution."""
# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import GetAtt, Route53
from edgesite.utils import camel_case


# Fixed hosted zone of every CloudFront distribution.
CLOUDFRONT_ZONE_ID = "Z2FDTNDATAQYW2"


def record_name(config, hostname):
    """Logical id of the record serving a hostname."""
    if hostname == config.domain:
        return "AliasRecord"
    label = hostname[: -len(config.domain) - 1]
    return f"{camel_case(label)}AliasRecord"


def alias_records(config, zone_id, distribution):
    """
    One A record per hostname served by the distribution.

    The hostnames are the same list the distribution takes its aliases from,
    a hostname dropped there disappears here on the next deployment.
    """
    records = []
    for hostname in config.hostnames:
        attrs = {
            "HostedZoneId": zone_id,
            "Name": f"{hostname}.",
            "Type": "A",
            "AliasTarget": {
                "DNSName": GetAtt(distribution, "DomainName"),
                "HostedZoneId": CLOUDFRONT_ZONE_ID,
                "EvaluateTargetHealth": False,
            },
        }
        records.append(type(record_name(config, hostname), (Route53.RecordSet,), attrs))
    return records
