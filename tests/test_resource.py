#!/usr/bin/env python3
"""
Testing Resource model.

We will define S3 and CloudFront resources and check their properties.
"""
# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import CloudFront, GetAtt, PropertyDeletion, PropertyOverride, Ref, S3, Sub


class Bucket(S3.Bucket):
    """Test S3 resource"""

    # This is our DSL, user don't have to define methods.
    # pylint: disable=R0903
    BucketName = "test"
    VersioningConfiguration = {"Status": "Suspended"}


class RetainedBucket(Bucket):
    """Bucket that survives its stack."""

    # pylint: disable=R0903
    BucketName = "test-retained"
    DeletionPolicy = "Retain"
    UpdateReplacePolicy = "Retain"


class AccessControl(CloudFront.OriginAccessControl):
    """Test origin access control."""

    # pylint: disable=R0903
    OriginAccessControlConfig = {
        "Name": "test-oac",
        "OriginAccessControlOriginType": "s3",
        "SigningBehavior": "always",
        "SigningProtocol": "sigv4",
    }


class Distribution(CloudFront.Distribution):
    """Distribution patched after synthesis."""

    # pylint: disable=R0903
    DistributionConfig = {
        "Enabled": True,
        "Origins": [
            {
                "Id": "Origin",
                "DomainName": GetAtt(Bucket, "RegionalDomainName"),
                "S3OriginConfig": {},
            }
        ],
    }
    Overrides = [
        PropertyOverride(
            "DistributionConfig.Origins.0.OriginAccessControlId",
            GetAtt(AccessControl, "Id"),
        ),
        PropertyDeletion("DistributionConfig.Origins.0.CustomOriginConfig"),
    ]


class Policy(S3.BucketPolicy):
    """Policy on the bucket."""

    # pylint: disable=R0903
    Bucket = Bucket
    PolicyDocument = {
        "Statement": [
            {
                "Effect": "Allow",
                "Action": "s3:GetObject",
                "Resource": Sub("${Bucket.Arn}/*"),
                "Principal": {"Service": "cloudfront.amazonaws.com"},
                "Condition": {"StringEquals": {"AWS:SourceArn": Ref("DistArn")}},
            }
        ]
    }
    DependsOn = [Distribution]


def test_resource_attrs():
    """Test S3 resource attrs."""
    resource = Bucket()
    # Checking class attributes.
    assert resource.BucketName == "test"
    assert resource.VersioningConfiguration == {"Status": "Suspended"}

    # Checking dynamic attributes.
    assert resource.resource_type == "AWS::S3::Bucket"
    assert resource.logical_name == "Bucket"
    assert resource.properties == {
        "BucketName": "test",
        "VersioningConfiguration": {"Status": "Suspended"},
    }
    assert resource.template == {
        "Properties": {
            "BucketName": "test",
            "VersioningConfiguration": {"Status": "Suspended"},
        },
        "Type": "AWS::S3::Bucket",
    }
    assert resource.dependencies == set()


def test_resource_inheritance():
    """Resource attributes sit next to Properties, not inside."""
    resource = RetainedBucket()
    assert resource.logical_name == "RetainedBucket"
    assert resource.resource_type == "AWS::S3::Bucket"
    assert resource.template == {
        "Type": "AWS::S3::Bucket",
        "Properties": {
            "BucketName": "test-retained",
            "VersioningConfiguration": {"Status": "Suspended"},
        },
        "DeletionPolicy": "Retain",
        "UpdateReplacePolicy": "Retain",
    }


def test_service_resource_type():
    """The service module name ends up in the resource type."""
    assert AccessControl().resource_type == "AWS::CloudFront::OriginAccessControl"
    assert CloudFront.Distribution().resource_type == "AWS::CloudFront::Distribution"


def test_overrides_applied_to_properties():
    """Declared properties stay as they are, overrides show up in the template."""
    resource = Distribution()
    declared = resource.declared_properties["DistributionConfig"]["Origins"][0]
    assert "OriginAccessControlId" not in declared

    origin = resource.template["Properties"]["DistributionConfig"]["Origins"][0]
    assert origin == {
        "Id": "Origin",
        "DomainName": {"Fn::GetAtt": ["Bucket", "RegionalDomainName"]},
        "S3OriginConfig": {},
        "OriginAccessControlId": {"Fn::GetAtt": ["AccessControl", "Id"]},
    }
    assert "Overrides" not in resource.template["Properties"]


def test_dependencies():
    """Dependencies come from functions, classes, DependsOn and overrides."""
    assert Distribution().dependencies == {"Bucket", "AccessControl"}
    assert Policy().dependencies == {"Bucket", "Distribution", "DistArn"}
    assert Policy().template["DependsOn"] == ["Distribution"]
    assert Policy().properties["Bucket"] == {"Ref": "Bucket"}
