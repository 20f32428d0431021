#!/usr/bin/env python3
"""
Fixtures used in tests
"""
import itertools

from edgesite.config import DomainConfig


ACCOUNT = "123456789012"
ZONE_ID = "Z0123456789ABCDEFGHIJ"
CERTIFICATE_ARN = (
    "arn:aws:acm:us-east-1:123456789012:"
    "certificate/0b6a3c2e-1f4d-4f7a-9d3e-2c1b0a9f8e7d"
)

SIMPLE_TEMPLATE = {
    "AWSTemplateFormatVersion": "2010-09-09",
    "Resources": {
        "Bucket": {
            "Type": "AWS::S3::Bucket",
            "Properties": {
                "BucketName": "test",
                "VersioningConfiguration": {"Status": "Suspended"},
            },
        }
    },
}


def make_config(**kwargs):
    """Configuration of the test site, fowler.dev in eu-west-1."""
    values = {"domain": "fowler.dev", "account": ACCOUNT, "region": "eu-west-1"}
    values.update(kwargs)
    return DomainConfig(**values)


def all_configs():
    """Every combination of the switches a site can be built with."""
    for binding, rewrite, removal in itertools.product(
        ["control", "identity"], [True, False], ["destroy", "retain"]
    ):
        yield make_config(
            access_binding=binding, rewrite_urls=rewrite, removal_policy=removal
        )
