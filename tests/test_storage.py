#!/usr/bin/env python3
"""
Testing the site bucket and the access binding.
"""
import pytest

from edgesite.website.storage import BLOCK_ALL, access_binding, site_bucket
from tests.fixtures import all_configs, make_config


@pytest.mark.parametrize("config", list(all_configs()), ids=repr)
def test_bucket_is_never_public(config):
    fragment = site_bucket(config)().template
    assert fragment["Properties"]["PublicAccessBlockConfiguration"] == BLOCK_ALL
    assert all(BLOCK_ALL.values())
    assert "WebsiteConfiguration" not in fragment["Properties"]
    assert "AccessControl" not in fragment["Properties"]


def test_bucket():
    fragment = site_bucket(make_config())().template
    assert fragment["Type"] == "AWS::S3::Bucket"
    assert fragment["Properties"]["BucketName"] == "fowler-dev-123456789012-hugo-site"
    assert fragment["Properties"]["OwnershipControls"] == {
        "Rules": [{"ObjectOwnership": "BucketOwnerEnforced"}]
    }
    assert fragment["DeletionPolicy"] == "Delete"
    assert fragment["UpdateReplacePolicy"] == "Delete"


def test_retained_bucket():
    fragment = site_bucket(make_config(removal_policy="retain"))().template
    assert fragment["DeletionPolicy"] == "Retain"
    assert fragment["UpdateReplacePolicy"] == "Retain"


def test_access_binding():
    control = access_binding(make_config())()
    assert control.resource_type == "AWS::CloudFront::OriginAccessControl"
    assert control.logical_name == "SiteOriginAccessControl"
    assert control.properties["OriginAccessControlConfig"] == {
        "Name": "fowler.dev-oac",
        "Description": "OAC for fowler.dev",
        "OriginAccessControlOriginType": "s3",
        "SigningBehavior": "always",
        "SigningProtocol": "sigv4",
    }

    identity = access_binding(make_config(access_binding="identity"))()
    assert identity.resource_type == "AWS::CloudFront::CloudFrontOriginAccessIdentity"
    assert identity.logical_name == "SiteOriginAccessIdentity"
