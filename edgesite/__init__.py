#!/usr/bin/env python3
"""
finder to create dynamic modules.

`from edgesite import S3` gives a module whose attributes are resource
classes, so `S3.Bucket` is the base class for an AWS::S3::Bucket.
"""
import sys

from importlib.machinery import ModuleSpec

from .models import ResourceBase, StackBase, Resource
from .fn import Ref, Fn, GetAtt, Join, Sub
from .overrides import PropertyDeletion, PropertyOverride
from .stack import Stack


class AWSFinder:
    """
    This class Follows the python module loading protocol and will serve as a virtual
    module.

    Ref: PEP-302
    """

    @classmethod
    def find_spec(cls, name, path, target=None):
        """
        If we are importing a service like edgesite.CloudFront, create a module for it.
        """
        # This is just following protocol
        # pylint: disable=W0613
        if name.startswith("edgesite."):
            _, service = name.split(".", 1)
            if service[:1].isupper() and "." not in service:
                return ModuleSpec(service, cls())
        return None

    def create_module(self, _):
        """Do nothing specific here."""
        # This is just following protocol
        # pylint: disable=R0201
        return None

    def exec_module(self, module):
        """Create a dynamic class and return it."""
        # This is just following protocol
        # pylint: disable=R0201
        def _getattr(name):
            if name.startswith("__"):
                raise AttributeError(name)
            cls = type(name, (Resource,), {"_module": module})
            return cls

        module.__getattr__ = _getattr


sys.meta_path += [AWSFinder]
