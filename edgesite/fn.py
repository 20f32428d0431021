#!/usr/bin/env python3
"""
Models that maps to Cloudformation functions.

Every function knows how to render itself and which logical ids it points
at, the latter is what the stack uses to build its dependency graph.
"""
import re


SUB_VARIABLE = re.compile(r"\$\{([^!}][^}]*)\}")


def logical_id(target):
    """Return the logical id of a resource class, or the target string."""
    if isinstance(target, type):
        return target.__name__
    if isinstance(target, str):
        return target
    raise ValueError(f"Invalid reference target: {target}")


def is_pseudo(name):
    """Pseudo parameters like AWS::Region are never dependencies."""
    return name.startswith("AWS::")


def replace_fn(node):
    """Iteratively replace all Fn/Ref in the node"""
    if isinstance(node, list):
        return [replace_fn(item) for item in node]
    if isinstance(node, dict):
        return {name: replace_fn(value) for name, value in node.items()}
    if isinstance(node, (str, int, float)):
        return node
    if isinstance(node, type):
        # A resource class used as a value is a Ref to it.
        return Ref(node).render()
    if isinstance(node, Ref):
        return node.render()
    if hasattr(Fn, node.__class__.__name__):
        return node.render()
    raise ValueError(f"Invalid value specified in the code: {node}")


def references(node):
    """Return the set of logical ids the node refers to."""
    found = set()
    if isinstance(node, list):
        for item in node:
            found |= references(item)
    elif isinstance(node, dict):
        for value in node.values():
            found |= references(value)
    elif isinstance(node, type):
        found.add(logical_id(node))
    elif isinstance(node, Ref) or hasattr(Fn, node.__class__.__name__):
        found |= node.references()
    return {name for name in found if not is_pseudo(name)}


class Ref:
    """Represents a ref function in Cloudformation."""

    # This is our DSL, it's a very thin wrapper around dictionary.
    # pylint: disable=R0903
    def __init__(self, target):
        """Creates a Ref node with a target, either a name or a resource class."""
        self.target = logical_id(target)

    def render(self):
        """Render the node as a dictionary."""
        return {"Ref": self.target}

    def references(self):
        """The target itself."""
        return {self.target}


class GetAtt:
    """Fn::GetAtt function."""

    # pylint: disable=R0903

    def __init__(self, target, attr):
        self.logical_name = logical_id(target)
        self.attr = attr

    def render(self):
        """Render the node with Fn::GetAtt."""
        return {"Fn::GetAtt": [self.logical_name, replace_fn(self.attr)]}

    def references(self):
        """The resource holding the attribute."""
        return {self.logical_name}


class Join:
    """Fn::Join function."""

    # pylint: disable=R0903

    def __init__(self, delimiter, elements):
        self.delimiter = delimiter
        self.elements = elements

    def render(self):
        """Render the node with Fn::Join."""
        return {"Fn::Join": [replace_fn(self.delimiter), replace_fn(self.elements)]}

    def references(self):
        """Logical ids referenced by the joined elements."""
        return references(self.elements)


class Sub:
    """Fn::Sub function."""

    # pylint: disable=R0903

    def __init__(self, target, mapping=None):
        if not isinstance(target, str):
            raise ValueError(
                f"The first argument of Fn::Sub must be string: `{target}`"
            )
        self.target = target
        self.mapping = mapping or {}

    def render(self):
        """Render the node with Fn::Sub."""
        if self.mapping:
            return {"Fn::Sub": [self.target, replace_fn(self.mapping)]}
        return {"Fn::Sub": self.target}

    def references(self):
        """Variables in the string, minus the ones provided by the mapping."""
        found = references(self.mapping)
        for variable in SUB_VARIABLE.findall(self.target):
            name = variable.split(".", 1)[0]
            if name not in self.mapping:
                found.add(name)
        return found


class Fn:
    """
    This is a container for all functions.

    Rationale is instead of having to import all the functions,
    we just import Fn and use any function as Fn.FuncName
    """

    # pylint: disable=R0903

    GetAtt = GetAtt
    Join = Join
    Sub = Sub
