#!/usr/bin/env python3
"""
The two stacks of a site and the order they are deployed in.

The certificate stack lives in us-east-1, the site stack in the configured
region. The certificate arn crosses over through the site stack's
CertificateArn parameter.
"""
from functools import cached_property

# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import GetAtt, Ref, Stack
from edgesite.exceptions import DeploymentError
from edgesite.hooks import (
    check_bucket_name_available,
    check_resource_graph,
    check_template_with_cfn_lint,
    cleanup_rollback_complete,
    empty_site_bucket,
)
from edgesite.utils import get_logger
from edgesite.website.certificate import (
    CERTIFICATE_REGION,
    certificate_domains,
    certificate_stack,
    find_hosted_zone,
    site_certificate,
)
from edgesite.website.distribution import (
    bucket_policy,
    rewrite_function,
    site_distribution,
)
from edgesite.website.dns import alias_records
from edgesite.website.identity import deploy_policy, deploy_user
from edgesite.website.storage import access_binding, site_bucket


logger = get_logger(__name__)

CERTIFICATE_ARN_PATTERN = (
    rf"^arn:aws[a-z-]*:acm:{CERTIFICATE_REGION}:\d{{12}}:certificate/[0-9a-f-]+$"
)


def placeholder_certificate_arn(config):
    """Stands in for the certificate arn while it does not exist yet."""
    return (
        f"arn:aws:acm:{CERTIFICATE_REGION}:{config.account}:"
        "certificate/00000000-0000-0000-0000-000000000000"
    )


def site_outputs(bucket, distribution, user):
    """Values CI needs to publish the site."""
    return {
        "BucketName": {
            "Value": Ref(bucket),
            "Description": "Name of the S3 bucket",
        },
        "DistributionId": {
            "Value": Ref(distribution),
            "Description": "CloudFront Distribution ID",
        },
        "DistributionDomainName": {
            "Value": GetAtt(distribution, "DomainName"),
            "Description": "CloudFront Distribution Domain Name",
        },
        "DeployUserName": {
            "Value": Ref(user),
            "Description": "IAM User for GitHub Actions",
        },
    }


def site_stack(config, zone_id, certificate_arn, certificate_names=None):
    """
    Stack with everything but the certificate.

    certificate_names defaults to the names the certificate stack requests,
    every alias of the distribution has to be one of them.
    """
    if certificate_names is None:
        certificate_names = certificate_domains(site_certificate(config, zone_id))

    bucket = site_bucket(config)
    binding = access_binding(config)
    rewrite = rewrite_function(config) if config.rewrite_urls else None
    distribution = site_distribution(
        config, bucket, binding, certificate_names, rewrite=rewrite
    )
    policy = bucket_policy(config, bucket, binding, distribution)
    records = alias_records(config, zone_id, distribution)
    user = deploy_user(config)

    resources = [bucket, binding]
    if rewrite is not None:
        resources.append(rewrite)
    resources += [distribution, policy, *records, user]
    resources.append(deploy_policy(config, user, bucket, distribution))

    attrs = {
        "Description": f"Static site for {config.domain}",
        "Resources": resources,
        "Parameters": {
            "CertificateArn": {
                "Type": "String",
                "Description": f"Certificate in {CERTIFICATE_REGION} for the site",
                "AllowedPattern": CERTIFICATE_ARN_PATTERN,
            },
        },
        "Outputs": site_outputs(bucket, distribution, user),
        "DeployOptions": {
            "region": config.region,
            "parameters": {"CertificateArn": certificate_arn},
            "capabilities": ["CAPABILITY_NAMED_IAM"],
            "tags": {"edgesite:domain": config.domain},
        },
        "Hooks": {
            "pre_deploy": [
                cleanup_rollback_complete,
                check_resource_graph,
                check_bucket_name_available,
                check_template_with_cfn_lint,
            ],
            "pre_delete": [empty_site_bucket],
        },
    }
    return type(f"{config.stack_prefix}SiteStack", (Stack,), attrs)()


class Site:
    """A site: the certificate stack, then the site stack."""

    def __init__(self, config, zone_id=None):
        self.config = config
        self._zone_id = zone_id

    @cached_property
    def zone_id(self):
        """Hosted zone of the domain, looked up once when not given."""
        return self._zone_id or find_hosted_zone(self.config.domain)

    @cached_property
    def certificate_stack(self):
        """The us-east-1 certificate stack of the site."""
        return certificate_stack(self.config, self.zone_id)

    def site_stack(self, certificate_arn=None):
        """The site stack, wired to the deployed certificate when there is one."""
        if certificate_arn is None:
            certificate_arn = self.certificate_arn(dryrun=True)
        return site_stack(self.config, self.zone_id, certificate_arn)

    def certificate_arn(self, dryrun):
        """Arn exported by the certificate stack."""
        arn = self.certificate_stack.outputs.get("CertificateArn")
        if arn:
            return arn
        if not dryrun:
            raise DeploymentError(
                f"Stack {self.certificate_stack.name} has no CertificateArn output."
            )
        logger.info("Certificate is not deployed yet, using a placeholder arn.")
        return placeholder_certificate_arn(self.config)

    def check(self):
        """
        Synthesize the site stack against a placeholder certificate.

        Overrides, certificate coverage and the resource graph all fail here,
        before the certificate stack is touched.
        """
        stack = self.site_stack(placeholder_certificate_arn(self.config))
        logger.debug(f"Synthesized {len(stack.template['Resources'])} resources.")
        check_resource_graph(stack, True, True)
        return stack

    def deploy(self, dryrun=True, wait=True):
        """
        Deploy the certificate stack, then the site stack.

        The certificate stack is always waited for since the site stack needs
        its output. DNS validation that never completes keeps this waiting.
        """
        self.check()
        self.certificate_stack.deploy(dryrun=dryrun, wait=True)
        stack = self.site_stack(self.certificate_arn(dryrun))
        stack.deploy(dryrun=dryrun, wait=wait)
        return stack

    def delete(self, dryrun=True, wait=True):
        """Delete in reverse order, the site stack uses the certificate."""
        self.site_stack().delete(dryrun=dryrun, wait=True)
        self.certificate_stack.delete(dryrun=dryrun, wait=wait)

    def outputs(self):
        """Outputs of the deployed site stack."""
        return self.site_stack().outputs
