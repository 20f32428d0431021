#!/usr/bin/env python3
"""Exceptions raised by edgesite."""


class EdgesiteError(Exception):
    """Base exception for edgesite."""


class ConfigError(EdgesiteError, ValueError):
    """Invalid site configuration."""


class OverrideError(EdgesiteError, ValueError):
    """A property override cannot be applied to the synthesized resource."""

    def __init__(self, logical_name, path, reason):
        self.logical_name = logical_name
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot apply override `{path}` on {logical_name}: {reason}")


class GraphError(EdgesiteError, ValueError):
    """The resource graph has a cycle or references an undeclared target."""


class HostedZoneNotFound(EdgesiteError, LookupError):
    """No hosted zone exists for the domain."""

    def __init__(self, domain):
        self.domain = domain
        super().__init__(f"No public hosted zone found for {domain}")


class BucketNameTaken(EdgesiteError):
    """The globally unique bucket name belongs to someone else."""

    def __init__(self, bucket_name, message=None):
        self.bucket_name = bucket_name
        super().__init__(
            message or f"Bucket name already taken by another account: {bucket_name}"
        )


class BucketOutsideStack(BucketNameTaken):
    """The bucket exists in this account but the stack does not own it."""

    def __init__(self, bucket_name):
        super().__init__(
            bucket_name,
            f"Bucket {bucket_name} exists in this account outside the stack, "
            "likely kept by an earlier deployment with removal policy retain.",
        )


class DeploymentError(EdgesiteError, RuntimeError):
    """A change set or a stack operation failed."""

    def __init__(self, message, reasons=None):
        self.reasons = reasons or []
        if self.reasons:
            message = message + "\n" + "\n".join(self.reasons)
        super().__init__(message)
