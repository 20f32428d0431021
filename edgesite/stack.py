#!/usr/bin/env python3
"""Stack definitions in edgesite."""
import json
import random
import time
from datetime import datetime

import boto3
import yaml
from botocore.exceptions import ClientError

from .exceptions import DeploymentError, GraphError
from .fn import is_pseudo, replace_fn
from .hooks import (
    check_resource_graph,
    check_template_with_cfn_lint,
    cleanup_rollback_complete,
)
from .models import StackBase
from .utils import format_changes, format_name, get_logger


logger = get_logger(__name__)


class Stack(metaclass=StackBase):
    """Represents a Cloudformation stack."""

    Hooks = {
        "pre_deploy": [
            cleanup_rollback_complete,
            check_resource_graph,
            check_template_with_cfn_lint,
        ],
    }

    def __init__(self):
        self.client = boto3.client(
            "cloudformation", region_name=self.deploy_options.get("region")
        )

    @property
    def name(self):
        """Name of the stack."""
        return self.deploy_options.get("name", format_name(self.__class__.__name__))

    @property
    def region(self):
        """Region of the stack."""
        return self.client.meta.region_name

    @property
    def deploy_options(self):
        """Shortcut to DeployOptions dict provided in Subclasses."""
        return getattr(self, "DeployOptions", {})

    @property
    def resources(self):
        """Instances of the declared resources, keyed by logical id."""
        if not hasattr(self, "Resources"):
            raise ValueError("Please define Resources in your stack.")
        resources = {}
        # Resources is defined in child classes.
        # pylint: disable=E1101
        for kls in self.Resources:
            resource = kls()
            if resource.logical_name in resources:
                raise GraphError(f"Duplicate logical id: {resource.logical_name}")
            resources[resource.logical_name] = resource
        return resources

    @property
    def template(self):
        """Internal python representation of a Cloudformation template."""
        tmplt = {
            "AWSTemplateFormatVersion": "2010-09-09",
            "Resources": {
                name: resource.template for name, resource in self.resources.items()
            },
        }
        optionals = [
            "Conditions",
            "Description",
            "Mappings",
            "Metadata",
            "Outputs",
            "Parameters",
            "Rules",
            "Transform",
        ]
        for name in optionals:
            if hasattr(self, name):
                tmplt[name] = replace_fn(getattr(self, name))

        return tmplt

    @property
    def json(self):
        """Return Cloudformaiton template in json format"""
        return json.dumps(self.template, indent=2)

    @property
    def yaml(self):
        """Return Cloudformaiton template in yaml format"""
        # Disable anchor in yaml

        # pyyaml will try to be smart and add an anchor to the generated yaml file.
        # This "feature" is not desirable.
        yaml.Dumper.ignore_aliases = lambda self, data: True
        return yaml.dump(self.template, Dumper=yaml.Dumper)

    @property
    def dependencies(self):
        """
        Dependency edges between resources, keyed by logical id.

        Refs to parameters are checked here but are not edges; a reference to
        anything else that is not declared in this stack is an error.
        """
        resources = self.resources
        parameters = set(getattr(self, "Parameters", {}))
        graph = {}
        for name, resource in resources.items():
            edges = set()
            for target in resource.dependencies:
                if target in resources:
                    edges.add(target)
                elif target not in parameters and not is_pseudo(target):
                    raise GraphError(f"{name} references undeclared `{target}`")
            graph[name] = edges
        return graph

    @property
    def creation_order(self):
        """Resources sorted so that every resource comes after its dependencies."""
        graph = self.dependencies
        order = []
        ready = sorted(name for name, edges in graph.items() if not edges)
        pending = {name: set(edges) for name, edges in graph.items() if edges}
        while ready:
            name = ready.pop(0)
            order.append(name)
            released = []
            for other, edges in pending.items():
                edges.discard(name)
                if not edges:
                    released.append(other)
            for other in released:
                del pending[other]
            ready = sorted(ready + released)
        if pending:
            raise GraphError(f"Dependency cycle between: {', '.join(sorted(pending))}")
        return order

    @property
    def describe_stack_response(self):
        """Return the response from descibe-stacks call."""
        try:
            return self.client.describe_stacks(StackName=self.name)["Stacks"][0]
        except ClientError as error:
            code = error.response["Error"]["Code"]
            message = error.response["Error"]["Message"]
            if code == "ValidationError" and message.endswith("does not exist"):
                return {"StackStatus": "DOES_NOT_EXIST"}
            raise

    @property
    def status(self):
        """Return the status of the stack as a string."""
        return self.describe_stack_response["StackStatus"]

    @property
    def exists(self):
        """Check whether this stack exists."""
        return self.status != "DOES_NOT_EXIST"

    @property
    def outputs(self):
        """Outputs of the deployed stack as a dict, empty if not deployed."""
        return {
            output["OutputKey"]: output["OutputValue"]
            for output in self.describe_stack_response.get("Outputs", [])
        }

    def deploy(self, dryrun=True, wait=True):
        """Wrapper around different steps in the stack deployment process."""
        self.pre_deploy(dryrun, wait)
        self.__deploy(dryrun, wait)
        self.post_deploy(dryrun, wait)

    def __deploy(self, dryrun, wait):
        """Deploy stack changes via changeset."""
        create, name = self.__create_changeset()
        action = "Creating" if create else "Updating"
        logger.info(f"{action} {self.name} stack in {self.region}.")

        changes = self.__wait_changeset(name)
        if changes == []:
            logger.info(f"No change in {self.name} stack.")
            self.client.delete_change_set(ChangeSetName=name, StackName=self.name)
            return

        logger.info(f"Changes in changeset `{name}`: \n{format_changes(changes)}")

        if not dryrun:
            logger.info(f"Executing changeset `{name}`.")
            self.client.execute_change_set(ChangeSetName=name, StackName=self.name)
            if wait and not dryrun:
                self.__wait_stack()
        else:
            self.client.delete_change_set(ChangeSetName=name, StackName=self.name)
            if create:
                # An empty stack will stay there until we delete it.
                self.client.delete_stack(StackName=self.name)
            logger.info("Skipping deployment as this is a dry run.")

    def pre_deploy(self, dryrun, wait):
        """Allowing the subclass to add additional steps before the deployment."""
        for hook in self.Hooks.get("pre_deploy", []):
            hook(self, dryrun, wait)

    def post_deploy(self, dryrun, wait):
        """Allowing the subclass to add additional steps after the deployment."""
        for hook in self.Hooks.get("post_deploy", []):
            hook(self, dryrun, wait)

    def delete(self, dryrun=True, wait=True):
        """Wrapper around different steps in the stack deletion process."""
        self.pre_delete(dryrun, wait)
        self.__delete(dryrun, wait)
        self.post_delete(dryrun, wait)

    def pre_delete(self, dryrun, wait):
        """Allowing the subclass to add additional steps before the deletion."""
        for hook in self.Hooks.get("pre_delete", []):
            hook(self, dryrun, wait)

    def post_delete(self, dryrun, wait):
        """Allowing the subclass to add additional steps after the deletion."""
        for hook in self.Hooks.get("post_delete", []):
            hook(self, dryrun, wait)

    def __delete(self, dryrun, wait):
        """Delete stack."""
        if dryrun:
            logger.info("Skipping deletion as this is a dry run.")
        else:
            logger.info(f"Deleting stack: `{self.name}`.")
            self.client.delete_stack(StackName=self.name)
            if wait and not dryrun:
                self.__wait_stack()

    def __create_changeset(self):
        """Create a changeset."""
        suffix = bytearray(random.getrandbits(8) for _ in range(4)).hex()
        name = f"edgesite-{datetime.now().strftime('%Y-%m-%d-%H-%M-%S')}-{suffix}"
        parameters = [
            {"ParameterKey": key, "ParameterValue": value}
            for key, value in self.deploy_options.get("parameters", {}).items()
        ]
        tags = [
            {"Key": tag, "Value": value}
            for tag, value in self.deploy_options.get("tags", {}).items()
        ]
        kwargs = {
            "StackName": self.name,
            "Parameters": parameters,
            "Tags": tags,
            "ChangeSetName": name,
            "ChangeSetType": "UPDATE" if self.exists else "CREATE",
            "Capabilities": self.deploy_options.get("capabilities", []),
            "TemplateBody": self.yaml,
        }

        logger.info(f"Creating changeset {name}.")
        self.client.create_change_set(**kwargs)
        return kwargs["ChangeSetType"] == "CREATE", name

    def __wait_changeset(self, name):
        """Wait till a changeset is available and return it's changes."""
        kwargs = {"ChangeSetName": name, "StackName": self.name}

        while True:
            response = self.client.describe_change_set(**kwargs)
            status = response["Status"]
            exec_status = response["ExecutionStatus"]

            if status == "FAILED":
                empty_changeset_reasons = [
                    "didn't contain changes",
                    "No updates are to be performed.",
                ]
                for reason in empty_changeset_reasons:
                    if reason in response["StatusReason"]:
                        return []
                raise DeploymentError(
                    f"Failed to create changeset for {self.name}: {response['StatusReason']}"
                )

            if status == "CREATE_COMPLETE" and exec_status == "AVAILABLE":
                if not response.get("NextToken"):
                    # Don't have lot's of changes, no need for another api call.
                    return response.get("Changes", [])
                changes = response.get("Changes", [])
                # setting NextToken in kwargs.
                kwargs["NextToken"] = response["NextToken"]
                break
            logger.info(
                f"Status of changeset is `{status}`, execution status is `{exec_status}`"
            )
            # Change set should be ready within seconds.
            time.sleep(3)

        while True:
            response = self.client.describe_change_set(**kwargs)
            changes += response.get("Changes", [])
            if not response.get("NextToken"):
                break
            kwargs["NextToken"] = response["NextToken"]
        return changes

    def failure_reasons(self):
        """Reasons of the failed resource events, most recent first."""
        response = self.client.describe_stack_events(StackName=self.name)
        return [
            f"{event['LogicalResourceId']}: {event.get('ResourceStatusReason', '')}"
            for event in response["StackEvents"]
            if event["ResourceStatus"].endswith("_FAILED")
        ]

    def __wait_stack(self):
        # No timeout here. A certificate waiting for DNS validation can keep
        # the stack in progress for as long as the zone is not delegated.
        while True:
            current_status = self.status
            if current_status == "DOES_NOT_EXIST":
                # Delete complete
                return

            if current_status.split("_")[-1] in ["FAILED", "COMPLETE"]:
                break
            logger.info(f"Waiting till stack operation completes: {current_status}.")
            time.sleep(5)

        logger.info(f"Stack operation finished: {current_status}")
        bad_statuses = [
            "UPDATE_ROLLBACK_COMPLETE",
            "ROLLBACK_COMPLETE",
        ]
        if current_status in bad_statuses or current_status.endswith("FAILED"):
            raise DeploymentError(
                f"Failed to create/update stack {self.name}: {current_status}",
                self.failure_reasons(),
            )
