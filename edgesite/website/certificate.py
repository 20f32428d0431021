#!/usr/bin/env python3
"""
Certificate for the site, always issued in us-east-1 because CloudFront
only reads certificates from there.
"""
import boto3

# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import CertificateManager, Ref, Stack
from edgesite.exceptions import HostedZoneNotFound
from edgesite.utils import get_logger


logger = get_logger(__name__)

CERTIFICATE_REGION = "us-east-1"


def find_hosted_zone(domain, client=None):
    """
    Return the id of the public hosted zone named after the domain.

    The zone has to exist already, it is looked up and never created.
    """
    client = client or boto3.client("route53")
    response = client.list_hosted_zones_by_name(DNSName=domain)
    for zone in response["HostedZones"]:
        if zone["Name"].rstrip(".") != domain:
            continue
        if zone.get("Config", {}).get("PrivateZone"):
            continue
        zone_id = zone["Id"].split("/")[-1]
        logger.info(f"Found hosted zone {zone_id} for {domain}.")
        return zone_id
    raise HostedZoneNotFound(domain)


def site_certificate(config, zone_id):
    """DNS validated certificate for the bare domain and its www alias."""

    class SiteCertificate(CertificateManager.Certificate):
        # This is our DSL, user don't have to define methods.
        # pylint: disable=R0903
        DomainName = config.domain
        SubjectAlternativeNames = [config.www_domain]
        ValidationMethod = "DNS"
        # With a hosted zone per name the challenge records are created for us.
        DomainValidationOptions = [
            {"DomainName": hostname, "HostedZoneId": zone_id}
            for hostname in config.hostnames
        ]

    return SiteCertificate


def certificate_domains(certificate):
    """Every name covered by a certificate resource class."""
    return [certificate.DomainName] + list(certificate.SubjectAlternativeNames)


def certificate_stack(config, zone_id):
    """Stack holding the certificate, exporting its arn as CertificateArn."""
    certificate = site_certificate(config, zone_id)
    attrs = {
        "Description": f"Certificate for {config.domain}",
        "Resources": [certificate],
        "Outputs": {
            "CertificateArn": {
                "Value": Ref(certificate),
                "Description": "ARN of the certificate used by CloudFront",
            },
        },
        "DeployOptions": {
            "region": CERTIFICATE_REGION,
            "tags": {"edgesite:domain": config.domain},
        },
    }
    return type(f"{config.stack_prefix}CertificateStack", (Stack,), attrs)()
