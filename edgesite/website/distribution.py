#!/usr/bin/env python3
"""
CloudFront distribution in front of the site bucket.

The distribution is declared the way a plain S3 origin is declared. Binding
an origin access control is not part of that shape, so it is applied as a
named list of overrides on the synthesized distribution, see
origin_access_patch. The bucket policy then names this distribution only.
"""
import jinja2

# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import CloudFront, GetAtt, PropertyDeletion, PropertyOverride, Ref, S3, Sub
from edgesite.exceptions import ConfigError


INDEX_DOCUMENT = "index.html"
NOT_FOUND_PAGE = "/404.html"
NOT_FOUND_TTL = 30 * 60
ORIGIN_ID = "SiteOrigin"
# Managed policy "CachingOptimized".
CACHING_OPTIMIZED = "658327ea-f89d-4fab-a63d-7e88639e58f6"
CLOUDFRONT_PRINCIPAL = "cloudfront.amazonaws.com"

VIEWER_REQUEST = """
function handler(event) {
  var request = event.request;
  var uri = request.uri;
  if (uri.charAt(uri.length - 1) === '/') {
    request.uri = uri + '{{ index_document }}';
  } else if (uri.substring(uri.lastIndexOf('/') + 1).indexOf('.') === -1) {
    request.uri = uri + '/{{ index_document }}';
  }
  return request;
}
"""


def rewrite_uri(uri, index_document=INDEX_DOCUMENT):
    """
    Map a pretty url onto the document behind it.

    This is the rule the viewer request function runs at the edge:

        /blog/     -> /blog/index.html
        /about     -> /about/index.html
        /style.css -> /style.css
    """
    if uri.endswith("/"):
        return uri + index_document
    if "." not in uri.rsplit("/", 1)[-1]:
        return f"{uri}/{index_document}"
    return uri


def viewer_request_code(index_document=INDEX_DOCUMENT):
    """Source of the CloudFront Function implementing rewrite_uri."""
    template = jinja2.Template(VIEWER_REQUEST)
    return template.render(index_document=index_document).strip() + "\n"


def rewrite_function(config):
    """Viewer request function for pretty urls."""

    class UrlRewriteFunction(CloudFront.Function):
        # This is our DSL, user don't have to define methods.
        # pylint: disable=R0903
        Name = f"{config.stack_prefix}UrlRewrite"
        AutoPublish = True
        FunctionCode = viewer_request_code()
        FunctionConfig = {
            "Comment": f"Pretty url rewrite for {config.domain}",
            "Runtime": "cloudfront-js-1.0",
        }

    return UrlRewriteFunction


def error_responses():
    """Both a denied read and a missing object end up on the 404 page."""
    return [
        {
            "ErrorCode": code,
            "ResponseCode": 404,
            "ResponsePagePath": NOT_FOUND_PAGE,
            "ErrorCachingMinTTL": NOT_FOUND_TTL,
        }
        for code in [403, 404]
    ]


def error_page(status, responses=None):
    """Return (page, status) served for an origin status, None if passed through."""
    for response in error_responses() if responses is None else responses:
        if response["ErrorCode"] == status:
            return response["ResponsePagePath"], response["ResponseCode"]
    return None


def covers(certificate_name, hostname):
    """Whether a certificate name, possibly a wildcard, covers the hostname."""
    if certificate_name.startswith("*."):
        head, _, tail = hostname.partition(".")
        return bool(head) and tail == certificate_name[2:]
    return certificate_name == hostname


def check_certificate_coverage(hostnames, certificate_names):
    """Refuse aliases the certificate cannot serve."""
    uncovered = [
        hostname
        for hostname in hostnames
        if not any(covers(name, hostname) for name in certificate_names)
    ]
    if uncovered:
        raise ConfigError(
            f"Certificate does not cover: {', '.join(uncovered)}"
        )


def distribution_arn(distribution):
    """Arn of the distribution, derived from the live resource."""
    return Sub(
        "arn:${AWS::Partition}:cloudfront::${AWS::AccountId}:distribution/"
        f"${{{distribution.__name__}}}"
    )


def s3_origin(bucket, identity=None):
    """Origin definition for a bucket served through its REST endpoint."""
    s3_config = {}
    if identity is not None:
        s3_config["OriginAccessIdentity"] = Sub(
            f"origin-access-identity/cloudfront/${{{identity.__name__}}}"
        )
    return {
        "Id": ORIGIN_ID,
        "DomainName": GetAtt(bucket, "RegionalDomainName"),
        "S3OriginConfig": s3_config,
    }


def origin_access_patch(access_control):
    """Overrides binding an origin access control to the first origin."""
    origin = "DistributionConfig.Origins.0"
    return [
        PropertyOverride(f"{origin}.OriginAccessControlId", GetAtt(access_control, "Id")),
        # Both forms on one origin are rejected, the identity has to be empty.
        PropertyOverride(f"{origin}.S3OriginConfig.OriginAccessIdentity", ""),
        PropertyDeletion(f"{origin}.CustomOriginConfig"),
    ]


def site_distribution(config, bucket, binding, certificate_names, rewrite=None):
    """The distribution serving every configured hostname."""
    check_certificate_coverage(config.hostnames, certificate_names)

    identity = binding if config.access_binding == "identity" else None
    behavior = {
        "TargetOriginId": ORIGIN_ID,
        "ViewerProtocolPolicy": "redirect-to-https",
        "CachePolicyId": CACHING_OPTIMIZED,
        "AllowedMethods": ["GET", "HEAD"],
        "CachedMethods": ["GET", "HEAD"],
        "Compress": True,
    }
    if rewrite is not None:
        behavior["FunctionAssociations"] = [
            {"EventType": "viewer-request", "FunctionARN": GetAtt(rewrite, "FunctionARN")}
        ]

    class SiteDistribution(CloudFront.Distribution):
        # This is our DSL, user don't have to define methods.
        # pylint: disable=R0903
        DistributionConfig = {
            "Enabled": True,
            "Comment": f"Static site for {config.domain}",
            "Aliases": list(config.hostnames),
            "DefaultRootObject": INDEX_DOCUMENT,
            "HttpVersion": "http2",
            "Origins": [s3_origin(bucket, identity)],
            "DefaultCacheBehavior": behavior,
            "CustomErrorResponses": error_responses(),
            "ViewerCertificate": {
                "AcmCertificateArn": Ref("CertificateArn"),
                "SslSupportMethod": "sni-only",
                "MinimumProtocolVersion": "TLSv1.2_2021",
            },
        }
        Overrides = [] if identity is not None else origin_access_patch(binding)

    return SiteDistribution


def bucket_policy(config, bucket, binding, distribution):
    """Read access for the distribution only."""
    if config.access_binding == "identity":
        principal = {"CanonicalUser": GetAtt(binding, "S3CanonicalUserId")}
        condition = None
    else:
        principal = {"Service": CLOUDFRONT_PRINCIPAL}
        # Without the source arn any distribution could read through the
        # shared service principal.
        condition = {"StringEquals": {"AWS:SourceArn": distribution_arn(distribution)}}

    statement = {
        "Sid": "AllowCloudFrontRead",
        "Effect": "Allow",
        "Action": "s3:GetObject",
        "Resource": Sub(f"${{{bucket.__name__}.Arn}}/*"),
        "Principal": principal,
    }
    if condition is not None:
        statement["Condition"] = condition

    class SiteBucketPolicy(S3.BucketPolicy):
        # pylint: disable=R0903
        Bucket = bucket
        PolicyDocument = {"Version": "2012-10-17", "Statement": [statement]}

    return SiteBucketPolicy
