#!/usr/bin/env python3
"""
The private bucket holding the site and the mechanism that lets the
distribution, and nothing else, read from it.
"""
# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import CloudFront, S3

# Not configurable: no input may open the bucket to the public.
BLOCK_ALL = {
    "BlockPublicAcls": True,
    "BlockPublicPolicy": True,
    "IgnorePublicAcls": True,
    "RestrictPublicBuckets": True,
}


def site_bucket(config):
    """Bucket for the site assets, served through the REST endpoint only."""

    class SiteBucket(S3.Bucket):
        """Site assets."""

        # This is our DSL, user don't have to define methods.
        # pylint: disable=R0903
        BucketName = config.bucket_name
        PublicAccessBlockConfiguration = dict(BLOCK_ALL)
        OwnershipControls = {"Rules": [{"ObjectOwnership": "BucketOwnerEnforced"}]}
        BucketEncryption = {
            "ServerSideEncryptionConfiguration": [
                {"ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}}
            ]
        }
        DeletionPolicy = config.deletion_policy
        UpdateReplacePolicy = config.deletion_policy

    return SiteBucket


def origin_access_identity(config):
    """Legacy identity based access, referenced by the origin itself."""

    class SiteOriginAccessIdentity(CloudFront.CloudFrontOriginAccessIdentity):
        # pylint: disable=R0903
        CloudFrontOriginAccessIdentityConfig = {
            "Comment": f"Identity for {config.domain}",
        }

    return SiteOriginAccessIdentity


def origin_access_control(config):
    """Signed request based access, bound to the origin by an override."""

    class SiteOriginAccessControl(CloudFront.OriginAccessControl):
        # pylint: disable=R0903
        OriginAccessControlConfig = {
            "Name": f"{config.domain}-oac",
            "Description": f"OAC for {config.domain}",
            "OriginAccessControlOriginType": "s3",
            "SigningBehavior": "always",
            "SigningProtocol": "sigv4",
        }

    return SiteOriginAccessControl


def access_binding(config):
    """The access binding class for the configured strategy."""
    if config.access_binding == "identity":
        return origin_access_identity(config)
    return origin_access_control(config)
