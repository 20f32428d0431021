#!/usr/bin/env python3
"""
Deployment identity handed to CI.

It can sync objects into the site bucket and invalidate the site
distribution, nothing more. Credential rotation is left to the operator.
"""
# edgesite generates modules on demand.
# pylint: disable=E0611
from edgesite import GetAtt, IAM, Sub
from edgesite.website.distribution import distribution_arn


OBJECT_ACTIONS = [
    "s3:GetObject",
    "s3:PutObject",
    "s3:DeleteObject",
    "s3:ListBucket",
]
INVALIDATION_ACTIONS = ["cloudfront:CreateInvalidation"]


def deploy_user(config):
    """The principal used by CI."""

    class DeployUser(IAM.User):
        # This is our DSL, user don't have to define methods.
        # pylint: disable=R0903
        UserName = config.deploy_user_name

    return DeployUser


def deploy_policy(config, user, bucket, distribution):
    """Inline policy of the deploy user, scoped to this stack's resources."""

    class DeployPolicy(IAM.Policy):
        # pylint: disable=R0903
        PolicyName = f"{config.stack_prefix}DeployPolicy"
        Users = [user]
        PolicyDocument = {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Sid": "SyncSiteObjects",
                    "Effect": "Allow",
                    "Action": OBJECT_ACTIONS,
                    "Resource": [
                        GetAtt(bucket, "Arn"),
                        Sub(f"${{{bucket.__name__}.Arn}}/*"),
                    ],
                },
                {
                    "Sid": "InvalidateSiteCache",
                    "Effect": "Allow",
                    "Action": INVALIDATION_ACTIONS,
                    "Resource": [distribution_arn(distribution)],
                },
            ],
        }

    return DeployPolicy
