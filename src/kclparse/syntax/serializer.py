"""Serialize KCL AST back to KCL source.

Converts AST nodes to canonical KCL source code. Useful for:
- Formatters
- Code generators
- Property-based testing (roundtrip: parse -> serialize -> parse)

Canonical layout:
    name = (a: A, b: B -> R) => body
    f(x, 1)
    (lhs + rhs)
    let
        x = 1
    in x

Python 3.13+.
"""

from kclparse.constants import MAX_NUMBER_VALUE, RESERVED_KEYWORDS

from .ast import (
    Arithmetic,
    Assignment,
    Expression,
    FnDef,
    FnInvocation,
    Identifier,
    LetIn,
    Name,
    NumberLiteral,
    Program,
)
from .parser.primitives import is_valid_identifier
from .visitor import ASTVisitor

__all__ = ["KclSerializer", "SerializationValidationError", "serialize"]


class SerializationValidationError(ValueError):
    """Raised when AST validation fails during serialization.

    This error indicates the AST would produce source that does not parse
    back. Common causes:
    - Identifiers that are reserved keywords or contain non-alphanumerics
    - Number literals outside the unsigned 64-bit range
    - Let-in blocks without bindings
    """


def _validate_identifier(identifier: Identifier, context: str) -> None:
    name = identifier.name
    if not is_valid_identifier(name):
        msg = f"Invalid identifier {name!r} in {context}"
        raise SerializationValidationError(msg)
    if name in RESERVED_KEYWORDS:
        msg = f"Reserved keyword {name!r} used as identifier in {context}"
        raise SerializationValidationError(msg)


def _validate_expression(expr: Expression, context: str) -> None:
    """Validate an expression tree.

    Raises:
        SerializationValidationError: If validation fails
    """
    match expr:
        case NumberLiteral():
            if not 0 <= expr.value <= MAX_NUMBER_VALUE:
                msg = f"Number {expr.value} out of range in {context}"
                raise SerializationValidationError(msg)
        case Name():
            _validate_identifier(expr.id, context)
        case FnInvocation():
            _validate_identifier(expr.fn_name, context)
            for arg in expr.args:
                _validate_expression(arg, context)
        case LetIn():
            if not expr.bindings:
                msg = f"Let-in block without bindings in {context}"
                raise SerializationValidationError(msg)
            for binding in expr.bindings:
                _validate_identifier(binding.identifier, context)
                _validate_expression(binding.value, context)
            _validate_expression(expr.body, context)
        case Arithmetic():
            _validate_expression(expr.lhs, context)
            _validate_expression(expr.rhs, context)


def _validate_program(program: Program) -> None:
    """Validate a Program AST for serialization.

    Raises:
        SerializationValidationError: If validation fails
    """
    for fn_def in program.functions:
        context = f"function '{fn_def.fn_name.name}'"
        _validate_identifier(fn_def.fn_name, context)
        for param in fn_def.params:
            _validate_identifier(param.name, context)
            _validate_identifier(param.kcl_type, context)
        _validate_identifier(fn_def.return_type, context)
        _validate_expression(fn_def.body, context)


# Let-in bindings are indented one level deeper than their `let`.
_INDENT: str = "    "


class KclSerializer(ASTVisitor):
    """Converts AST back to KCL source string.

    Thread-safe apart from the inherited depth guard: all output state is
    local to the serialize() call.

    Usage:
        >>> from kclparse.syntax import parse
        >>> program = parse("unit = ( -> Distance) => 1")
        >>> print(KclSerializer().serialize(program), end="")
        unit = ( -> Distance) => 1
    """

    def serialize(self, program: Program, *, validate: bool = False) -> str:
        """Serialize Program to KCL string.

        Args:
            program: Program AST node
            validate: If True, validate AST before serialization (default: False)

        Returns:
            KCL source code, one function definition per line group,
            newline-terminated (empty string for an empty program)

        Raises:
            SerializationValidationError: If validate=True and AST is invalid
            DepthLimitExceededError: If expressions nest deeper than max_depth
        """
        if validate:
            _validate_program(program)

        output: list[str] = []
        for fn_def in program.functions:
            self._serialize_fn_def(fn_def, output)
            output.append("\n")
        return "".join(output)

    def serialize_expression(self, expr: Expression) -> str:
        """Serialize a single expression (no trailing newline)."""
        output: list[str] = []
        self._serialize_expression(expr, output, "")
        return "".join(output)

    def _serialize_fn_def(self, node: FnDef, output: list[str]) -> None:
        params = ", ".join(f"{p.name.name}: {p.kcl_type.name}" for p in node.params)
        output.append(f"{node.fn_name.name} = ({params} -> {node.return_type.name}) => ")
        output.append(self.serialize_expression(node.body))

    def _serialize_expression(self, expr: Expression, output: list[str], indent: str) -> None:
        """Serialize Expression nodes using structural pattern matching.

        ``indent`` is the indentation of the line the expression starts on;
        let-in blocks place their bindings one level deeper and `in` at it.
        """
        with self._depth_guard:
            match expr:
                case NumberLiteral():
                    output.append(str(expr.value))

                case Name():
                    output.append(expr.id.name)

                case FnInvocation():
                    output.append(f"{expr.fn_name.name}(")
                    for i, arg in enumerate(expr.args):
                        if i > 0:
                            output.append(", ")
                        self._serialize_expression(arg, output, indent)
                    output.append(")")

                case Arithmetic():
                    output.append("(")
                    self._serialize_expression(expr.lhs, output, indent)
                    output.append(f" {expr.op.value} ")
                    self._serialize_expression(expr.rhs, output, indent)
                    output.append(")")

                case LetIn():
                    output.append("let\n")
                    for binding in expr.bindings:
                        self._serialize_assignment(binding, output, indent + _INDENT)
                    output.append(f"{indent}in ")
                    self._serialize_expression(expr.body, output, indent)

    def _serialize_assignment(self, node: Assignment, output: list[str], indent: str) -> None:
        output.append(f"{indent}{node.identifier.name} = ")
        self._serialize_expression(node.value, output, indent)
        output.append("\n")


def serialize(program: Program, *, validate: bool = False) -> str:
    """Serialize Program to KCL string.

    Convenience function for KclSerializer.serialize().

    Args:
        program: Program AST node
        validate: If True, validate AST before serialization (default: False)

    Returns:
        KCL source code

    Raises:
        SerializationValidationError: If validate=True and AST is invalid

    Example:
        >>> from kclparse.syntax import parse, serialize
        >>> program = parse("f = (x: T -> T) => (x + 1)")
        >>> assert serialize(program) == "f = (x: T -> T) => (x + 1)\\n"
    """
    serializer = KclSerializer()
    return serializer.serialize(program, validate=validate)
