"""Visitor pattern for AST traversal.

Enables tools to traverse the KCL AST without modifying node classes.

NOTE: This module follows Python stdlib ast.NodeVisitor naming convention.
Methods are named visit_NodeName (PascalCase) rather than visit_node_name (snake_case).
See: https://docs.python.org/3/library/ast.html#ast.NodeVisitor

Type Parameters:
- ASTVisitor[T] is generic over return type T
- ASTVisitor (no type param) defaults to T=ASTNode

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import Field, fields
from typing import ClassVar

from kclparse.constants import MAX_DEPTH
from kclparse.core.depth_guard import DepthGuard

from .ast import (
    Arithmetic,
    Assignment,
    ASTNode,
    FnDef,
    FnInvocation,
    Identifier,
    LetIn,
    Name,
    NumberLiteral,
    Parameter,
    Program,
)

__all__ = ["ASTVisitor"]

# Identifier.position is a Cursor (itself a dataclass); only these are children.
_NODE_TYPES: tuple[type, ...] = (
    Program,
    FnDef,
    Parameter,
    NumberLiteral,
    Name,
    FnInvocation,
    LetIn,
    Arithmetic,
    Assignment,
    Identifier,
)


class ASTVisitor[T = ASTNode]:
    """Base visitor for traversing the KCL AST.

    Follows stdlib ast.NodeVisitor convention: generic_visit() automatically
    traverses all child nodes in field order. Override visit_NodeType
    methods to add custom behavior.

    Uses a class-level dispatch table built once per subclass via
    __init_subclass__, plus an instance cache of bound methods.

    Example:
        >>> class CountInvocations(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.count = 0
        ...
        ...     def visit_FnInvocation(self, node: FnInvocation) -> ASTNode:
        ...         self.count += 1
        ...         return self.generic_visit(node)  # Traverse arguments
        ...
        >>> visitor = CountInvocations()
        >>> visitor.visit(program)
        >>> print(visitor.count)
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    _class_visit_methods: ClassVar[dict[str, str]] = {}

    _fields_cache: ClassVar[dict[type, tuple[Field[object], ...]]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {}
        for name in dir(cls):
            if name.startswith("visit_") and name != "visit":
                # "visit_FnDef" -> "FnDef"
                cls._class_visit_methods[name[6:]] = name

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard and dispatch cache.

        Subclasses MUST call super().__init__().

        Args:
            max_depth: Maximum traversal depth (default: MAX_DEPTH from constants)
        """
        effective_max_depth = max_depth if max_depth is not None else MAX_DEPTH
        self._depth_guard = DepthGuard(max_depth=effective_max_depth)
        self._instance_dispatch_cache: dict[type, Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Visit a node, dispatching to visit_<TypeName> or generic_visit.

        Args:
            node: AST node to visit

        Returns:
            Result of visiting the node
        """
        node_type = type(node)

        if node_type in self._instance_dispatch_cache:
            return self._instance_dispatch_cache[node_type](node)

        node_type_name = node_type.__name__
        if node_type_name in self._class_visit_methods:
            method = getattr(self, self._class_visit_methods[node_type_name])
        else:
            method = self.generic_visit

        self._instance_dispatch_cache[node_type] = method
        return method(node)  # type: ignore[no-any-return]  # getattr returns Any

    def _get_node_fields(self, node_type: type) -> tuple[Field[object], ...]:
        if node_type not in ASTVisitor._fields_cache:
            ASTVisitor._fields_cache[node_type] = fields(node_type)
        return ASTVisitor._fields_cache[node_type]

    def generic_visit(self, node: ASTNode) -> T:
        """Default visitor (traverses children with depth protection).

        Args:
            node: AST node to visit

        Returns:
            The node itself (identity)

        Raises:
            DepthLimitExceededError: If traversal depth exceeds max_depth
        """
        with self._depth_guard:
            for field in self._get_node_fields(type(node)):
                value = getattr(node, field.name)
                if isinstance(value, tuple):
                    for item in value:
                        if isinstance(item, _NODE_TYPES):
                            self.visit(item)
                elif isinstance(value, _NODE_TYPES):
                    self.visit(value)

        return node  # type: ignore[return-value]  # T defaults to ASTNode
