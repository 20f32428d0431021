#!/usr/bin/env python3
"""Model definitions in edgesite."""
from .fn import logical_id, references, replace_fn
from .overrides import apply_overrides
from .utils import get_logger


logger = get_logger(__name__)

# Capitalized class attributes that live next to Properties in the template.
RESOURCE_ATTRIBUTES = ["DependsOn", "DeletionPolicy", "UpdateReplacePolicy"]
RESERVED = set(RESOURCE_ATTRIBUTES) | {"Overrides"}


class ResourceBase(type):
    """Metaclass for all cfn resources."""

    def __new__(cls, name, bases, attrs):
        super_new = super().__new__

        # Only perform custom logic for the subclasses of Resource, but not Resource
        # itself.
        parents = [b for b in bases if isinstance(b, ResourceBase)]
        if not parents:
            return super_new(cls, name, bases, attrs)

        new_class = super_new(cls, name, bases, attrs)
        if "_module" in attrs:
            # We need to pass it down to the subclass
            setattr(new_class, "__module__", attrs["_module"].__name__)

        return new_class


class StackBase(type):
    """Metaclass for all cfn stacks."""

    def __new__(cls, name, bases, attrs):
        super_new = super().__new__

        # Only perform custom logic for the subclasses of Stack, but not Stack itself.
        parents = [b for b in bases if isinstance(b, StackBase)]
        if not parents:
            return super_new(cls, name, bases, attrs)

        new_class = super_new(cls, name, bases, attrs)
        if isinstance(attrs.get("Resources"), tuple):
            # Guard against the trailing comma in `Resources = [...],`.
            raise TypeError(f"Resources of {name} must be a list, not a tuple.")
        return new_class


class Resource(metaclass=ResourceBase):
    """Represents a resource defintion in Cloudformation."""

    Overrides = []

    @property
    def logical_name(self):
        """Return the logical of the resource, mapping to the name of the class."""
        return self.__class__.__name__

    @property
    def resource_type(self):
        """Return the type of the resource by analysing the import path."""
        base_class = type(self)
        while True:
            parent = base_class.__base__
            if parent.__module__ == __name__ and parent.__name__ == "Resource":
                break
            base_class = parent
        return f"AWS::{base_class.__module__}::{base_class.__name__}"

    @property
    def depends_on(self):
        """Explicit DependsOn entries as logical ids."""
        return [logical_id(item) for item in getattr(self, "DependsOn", [])]

    @property
    def template(self):
        """Return the template fragment of the resource."""
        fragment = {
            "Type": self.resource_type,
            "Properties": self.properties,
        }
        if self.depends_on:
            fragment["DependsOn"] = self.depends_on
        for name in ["DeletionPolicy", "UpdateReplacePolicy"]:
            if hasattr(self, name):
                fragment[name] = getattr(self, name)
        return fragment

    @property
    def declared_properties(self):
        """Return the properties as declared, before any override."""
        return {
            name: replace_fn(getattr(self, name))
            for name in dir(self)
            if name[0].isupper() and name not in RESERVED
        }

    @property
    def properties(self):
        """Return the properties of the resource with overrides applied."""
        return apply_overrides(
            self.declared_properties, self.Overrides, self.logical_name
        )

    @property
    def dependencies(self):
        """Logical ids this resource has to wait for."""
        found = set(self.depends_on)
        for name in dir(self):
            if name[0].isupper() and name not in RESERVED:
                found |= references(getattr(self, name))
        for override in self.Overrides:
            found |= override.references()
        found.discard(self.logical_name)
        return found
