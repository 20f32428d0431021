#!/usr/bin/env python3
"""
Low-level overrides applied to a synthesized resource.

Some resource shapes cannot be expressed by the declaration that produced
them, for example binding an origin access control to an S3 origin. Such
gaps are closed by a named list of overrides on the resource:

    class Distribution(CloudFront.Distribution):
        DistributionConfig = {...}
        Overrides = [
            PropertyOverride("DistributionConfig.Origins.0.OriginAccessControlId",
                             GetAtt(OAC, "Id")),
            PropertyDeletion("DistributionConfig.Origins.0.CustomOriginConfig"),
        ]

Paths are dotted and relative to Properties; numeric parts index into lists.
Missing dictionaries are created on assignment, deleting a missing key is a
no-op, anything else that does not fit the synthesized shape raises
OverrideError before the template leaves this process.
"""
from .exceptions import OverrideError
from .fn import references, replace_fn


def walk(properties, path, logical_name, create):
    """
    Follow the path down to the container holding its last part.

    Returns (container, key) or (None, None) when an intermediate dictionary
    is missing and create is False.
    """
    parts = path.split(".")
    if not path or not all(parts):
        raise OverrideError(logical_name, path, "empty path component")

    node = properties
    for part in parts[:-1]:
        if isinstance(node, dict):
            if part not in node:
                if not create:
                    return None, None
                node[part] = {}
            node = node[part]
        elif isinstance(node, list):
            node = node[index(node, part, path, logical_name)]
        else:
            raise OverrideError(logical_name, path, f"`{part}` is below a scalar")

    last = parts[-1]
    if isinstance(node, dict):
        return node, last
    if isinstance(node, list):
        return node, index(node, last, path, logical_name)
    raise OverrideError(logical_name, path, f"`{last}` is below a scalar")


def index(node, part, path, logical_name):
    """Convert a path part into a valid index of the list."""
    if not part.isdigit():
        raise OverrideError(logical_name, path, f"`{part}` is not a list index")
    position = int(part)
    if position >= len(node):
        raise OverrideError(
            logical_name, path, f"index {position} out of range ({len(node)} items)"
        )
    return position


class PropertyOverride:
    """Assign a value at a path of the synthesized properties."""

    def __init__(self, path, value):
        self.path = path
        self.value = value

    def __repr__(self):
        """Short form naming the path only."""
        return f"PropertyOverride({self.path!r})"

    def references(self):
        """Logical ids the assigned value points at."""
        return references(self.value)

    def apply(self, properties, logical_name):
        """Assign the value, creating missing dictionaries on the way."""
        container, key = walk(properties, self.path, logical_name, create=True)
        container[key] = replace_fn(self.value)


class PropertyDeletion:
    """Remove the value at a path of the synthesized properties."""

    def __init__(self, path):
        self.path = path

    def __repr__(self):
        """Short form naming the path only."""
        return f"PropertyDeletion({self.path!r})"

    def references(self):
        """A deletion points at nothing."""
        return set()

    def apply(self, properties, logical_name):
        """Remove the value, a missing key is left alone."""
        container, key = walk(properties, self.path, logical_name, create=False)
        if container is None:
            return
        if isinstance(container, list):
            del container[key]
        else:
            container.pop(key, None)


def apply_overrides(properties, overrides, logical_name):
    """Apply the overrides in order and return the properties."""
    for override in overrides:
        override.apply(properties, logical_name)
    return properties
