#!/usr/bin/env python3
"""
Site configuration.

Everything the stacks derive their names from lives here, so naming stays a
pure function of (domain, account).
"""
import os
import re

import boto3

from .exceptions import ConfigError
from .utils import camel_case


DEFAULT_DOMAIN = "fowler.dev"
ACCESS_BINDINGS = ["control", "identity"]
REMOVAL_POLICIES = {"destroy": "Delete", "retain": "Retain"}
BUCKET_NAME = re.compile(r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")
DOMAIN_NAME = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)(\.(?!-)[a-z0-9-]{1,63}(?<!-))+$")
TRUE = {"1", "true", "yes", "on"}
FALSE = {"0", "false", "no", "off"}


def parse_bool(name, value):
    """Parse a boolean environment variable."""
    lowered = value.strip().lower()
    if lowered in TRUE:
        return True
    if lowered in FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got `{value}`")


class DomainConfig:
    """Immutable input of a site deployment."""

    __slots__ = (
        "domain",
        "account",
        "region",
        "access_binding",
        "rewrite_urls",
        "removal_policy",
    )

    def __init__(
        self,
        domain,
        account,
        region,
        access_binding="control",
        rewrite_urls=True,
        removal_policy="destroy",
    ):
        domain = domain.strip().lower().rstrip(".")
        if not DOMAIN_NAME.match(domain):
            raise ConfigError(f"Invalid domain name: `{domain}`")
        if not re.match(r"^\d{12}$", str(account)):
            raise ConfigError(f"Invalid account id: `{account}`")
        if access_binding not in ACCESS_BINDINGS:
            raise ConfigError(
                f"access_binding must be one of {ACCESS_BINDINGS}, got `{access_binding}`"
            )
        if removal_policy not in REMOVAL_POLICIES:
            raise ConfigError(
                f"removal_policy must be one of {list(REMOVAL_POLICIES)}, "
                f"got `{removal_policy}`"
            )

        values = {
            "domain": domain,
            "account": str(account),
            "region": region,
            "access_binding": access_binding,
            "rewrite_urls": bool(rewrite_urls),
            "removal_policy": removal_policy,
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)

        if not BUCKET_NAME.match(self.bucket_name):
            raise ConfigError(f"Derived bucket name is invalid: `{self.bucket_name}`")

    def __setattr__(self, name, value):
        raise AttributeError(f"DomainConfig is immutable, cannot set {name}")

    def __eq__(self, other):
        if not isinstance(other, DomainConfig):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in self.__slots__))

    def __repr__(self):
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.__slots__)
        return f"DomainConfig({fields})"

    @property
    def www_domain(self):
        """The www alias of the domain."""
        return f"www.{self.domain}"

    @property
    def hostnames(self):
        """Every hostname served by the distribution."""
        return [self.domain, self.www_domain]

    @property
    def bucket_name(self):
        """Globally unique bucket name, derived from domain and account."""
        # Dots in a bucket name break TLS on the S3 REST endpoint.
        return f"{self.domain.replace('.', '-')}-{self.account}-hugo-site"

    @property
    def deploy_user_name(self):
        """Name of the IAM user handed to CI."""
        return f"{self.domain}-github-actions"

    @property
    def stack_prefix(self):
        """CamelCase prefix of stack and resource names."""
        return camel_case(self.domain)

    @property
    def deletion_policy(self):
        """CloudFormation DeletionPolicy matching the removal policy."""
        return REMOVAL_POLICIES[self.removal_policy]

    @classmethod
    def from_environment(cls, **overrides):
        """
        Build the configuration from the environment.

        Keyword arguments win over the environment. The account falls back to
        the caller identity, the region to the default boto3 session.
        """
        env = os.environ
        values = {
            "domain": env.get("EDGESITE_DOMAIN", DEFAULT_DOMAIN),
            "account": env.get("EDGESITE_ACCOUNT") or env.get("CDK_DEFAULT_ACCOUNT"),
            "region": env.get("EDGESITE_REGION")
            or env.get("AWS_DEFAULT_REGION")
            or env.get("AWS_REGION"),
            "access_binding": env.get("EDGESITE_ACCESS_BINDING", "control"),
            "removal_policy": env.get("EDGESITE_REMOVAL_POLICY", "destroy"),
        }
        if "EDGESITE_REWRITE_URLS" in env:
            values["rewrite_urls"] = parse_bool(
                "EDGESITE_REWRITE_URLS", env["EDGESITE_REWRITE_URLS"]
            )
        values.update({key: value for key, value in overrides.items() if value is not None})

        if not values["region"]:
            values["region"] = boto3.session.Session().region_name
        if not values["region"]:
            raise ConfigError("No region configured, set EDGESITE_REGION.")
        if not values["account"]:
            sts = boto3.client("sts", region_name=values["region"])
            values["account"] = sts.get_caller_identity()["Account"]
        return cls(**values)
