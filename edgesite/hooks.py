#!/usr/bin/env python3
"""Default hooks provided by edgesite."""
import sys

import boto3
from botocore.exceptions import ClientError
from cfnlint.api import lint
from cfnlint.config import ManualArgs

from .exceptions import BucketNameTaken, BucketOutsideStack, GraphError
from .fn import references
from .utils import get_logger


logger = get_logger(__name__)


def cleanup_rollback_complete(self, dryrun, wait):
    """Predeploy hook to delete last failed deployment."""
    if self.status == "ROLLBACK_COMPLETE":
        logger.info("Deleting stack in ROLLBACK_COMPLETE state.")
        if not dryrun:
            self.delete(dryrun, wait)


def check_resource_graph(self, _dryrun, _wait):
    """Predeploy hook to refuse cycles and dangling references."""
    order = self.creation_order
    declared = set(order) | set(getattr(self, "Parameters", {}))
    for name, output in getattr(self, "Outputs", {}).items():
        missing = references(output) - declared
        if missing:
            raise GraphError(
                f"Output {name} references undeclared {', '.join(sorted(missing))}"
            )
    logger.debug(f"Creation order of {self.name}: {', '.join(order)}")


def check_template_with_cfn_lint(self, _dryrun, _wait):
    """Predeploy hook to check template with cfn-lint."""
    config = ManualArgs(
        regions=[self.region],
        ignore_checks=self.deploy_options.get("lint_ignore", []),
    )
    matches = lint(self.json, config=config)

    errors = 0
    for match in matches:
        line = f"{match.rule.id} {match.message} (line {match.linenumber})"
        if match.rule.id.startswith("E"):
            errors += 1
            logger.error(line)
        else:
            logger.warning(line)
    if errors:
        logger.error(f"cfn-lint found {errors} error(s) in {self.name}.")
        sys.exit(2)


def stack_buckets(self):
    """Literal bucket names declared in the stack, with their deletion policy."""
    return [
        (fragment["Properties"]["BucketName"], fragment.get("DeletionPolicy", "Delete"))
        for fragment in self.template["Resources"].values()
        if fragment["Type"] == "AWS::S3::Bucket"
        and isinstance(fragment["Properties"].get("BucketName"), str)
    ]


def check_bucket_name_available(self, _dryrun, _wait):
    """
    Predeploy hook to fail fast on a bucket name owned by someone else.

    Bucket names are global. A 403 means another account owns the name, a
    bucket we can see while our stack does not exist yet is not ours either.
    Both are fatal, the name is derived from configuration and retrying
    cannot help.
    """
    if not stack_buckets(self):
        return
    client = boto3.client("s3", region_name=self.region)
    for bucket_name, _ in stack_buckets(self):
        try:
            client.head_bucket(Bucket=bucket_name)
        except ClientError as error:
            code = error.response["Error"]["Code"]
            if code in ["403", "Forbidden", "AccessDenied"]:
                raise BucketNameTaken(bucket_name) from error
            if code in ["404", "NoSuchBucket", "NotFound"]:
                continue
            raise
        if not self.exists:
            raise BucketOutsideStack(bucket_name)


def empty_site_bucket(self, dryrun, _wait):
    """Predelete hook to remove every object so the bucket can be deleted."""
    if not self.exists:
        return
    s3 = boto3.resource("s3", region_name=self.region)
    for bucket_name, deletion_policy in stack_buckets(self):
        if deletion_policy != "Delete":
            logger.info(f"Keeping objects in {bucket_name}, it is retained.")
            continue
        if dryrun:
            logger.info(f"Would empty bucket {bucket_name}.")
            continue
        logger.info(f"Emptying bucket {bucket_name}.")
        try:
            s3.Bucket(bucket_name).object_versions.all().delete()
        except ClientError as error:
            if error.response["Error"]["Code"] != "NoSuchBucket":
                raise
