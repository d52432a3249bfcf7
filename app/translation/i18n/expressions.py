"""Expression evaluator for inline template expressions.

Evaluates the small expression language used inside ``{{ ... }}`` markers:
numeric and string literals, arithmetic, string concatenation, comparisons,
logical operators, the ternary conditional, dot-path and index access and
calls to functions supplied in the variable context.

Semantics follow the JavaScript expressions translators write in templates
("+" concatenates as soon as one side is a string, missing members are
``undefined``, ``&&``/``||`` return an operand). Only names present in the
supplied context resolve; no Python builtins or attributes are reachable.
Every failure surfaces as a single EvaluationError.

Usage:
    from translation.i18n.expressions import evaluate

    evaluate('count > 5 ? "many" : "few"', {"count": 6})  # "many"
"""

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from translation.i18n.errors import EvaluationError
from translation.i18n.models import Context


class _Undefined:
    """Value of a missing member, distinct from None (null)."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()

_LITERALS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>\d+\.\d*|\.\d+|\d+)
  | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
  | (?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
  | (?P<op>===|!==|==|!=|<=|>=|&&|\|\||[-+*/%<>!?:.,()\[\]])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "0": "\0"}

Node = Callable[[Context], Any]


@dataclass(frozen=True)
class Token:
    kind: str
    value: Any
    pos: int


def _unescape(raw: str) -> str:
    body = raw[1:-1]
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def tokenize(source: str) -> List[Token]:
    """Split an expression into tokens.

    Raises:
        EvaluationError: On a character that starts no token.
    """
    tokens = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise EvaluationError(
                f"Unexpected character {source[pos]!r} at position {pos}"
            )
        kind = match.lastgroup
        text = match.group()
        if kind == "number":
            value: Any = float(text) if "." in text else int(text)
            tokens.append(Token("number", value, pos))
        elif kind == "string":
            tokens.append(Token("string", _unescape(text), pos))
        elif kind in ("name", "op"):
            tokens.append(Token(kind, text, pos))
        pos = match.end()
    tokens.append(Token("eof", None, pos))
    return tokens


# -- value semantics ---------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


def to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if _is_number(value):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def to_string(value: Any) -> str:
    """Coerce a value to a string the way template authors expect."""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if _is_nullish(item) else to_string(item) for item in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def to_display(value: Any) -> str:
    """String spliced into a template; null and undefined render empty."""
    if _is_nullish(value):
        return ""
    return to_string(value)


def truthy(value: Any) -> bool:
    if _is_nullish(value) or value is False:
        return False
    if _is_number(value):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return bool(value)
    return True


def _add(left: Any, right: Any) -> Any:
    textual = (str, list, tuple, Mapping)
    if isinstance(left, textual) or isinstance(right, textual):
        return to_string(left) + to_string(right)
    return to_number(left) + to_number(right)


def _subtract(left: Any, right: Any) -> Any:
    return to_number(left) - to_number(right)


def _multiply(left: Any, right: Any) -> Any:
    return to_number(left) * to_number(right)


def _divide(left: Any, right: Any) -> Any:
    divisor = to_number(right)
    if divisor == 0:
        raise EvaluationError("Division by zero")
    return to_number(left) / divisor


def _modulo(left: Any, right: Any) -> Any:
    dividend, divisor = to_number(left), to_number(right)
    if divisor == 0:
        raise EvaluationError("Division by zero")
    result = math.fmod(dividend, divisor)
    if isinstance(dividend, int) and isinstance(divisor, int):
        return int(result)
    return result


def strict_equals(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return left == right
    if _is_nullish(left) or _is_nullish(right):
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is right


def loose_equals(left: Any, right: Any) -> bool:
    if _is_nullish(left) or _is_nullish(right):
        return _is_nullish(left) and _is_nullish(right)
    if isinstance(left, bool) or isinstance(right, bool):
        return to_number(left) == to_number(right)
    if _is_number(left) and isinstance(right, str):
        return left == to_number(right)
    if isinstance(left, str) and _is_number(right):
        return to_number(left) == right
    return strict_equals(left, right)


def _comparison(check: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(left: Any, right: Any) -> bool:
        if isinstance(left, str) and isinstance(right, str):
            return check(left, right)
        left_num, right_num = to_number(left), to_number(right)
        if math.isnan(left_num) or math.isnan(right_num):
            return False
        return check(left_num, right_num)

    return compare


_EQUALITY = {
    "===": strict_equals,
    "!==": lambda a, b: not strict_equals(a, b),
    "==": loose_equals,
    "!=": lambda a, b: not loose_equals(a, b),
}

_RELATIONAL = {
    "<": _comparison(lambda a, b: a < b),
    "<=": _comparison(lambda a, b: a <= b),
    ">": _comparison(lambda a, b: a > b),
    ">=": _comparison(lambda a, b: a >= b),
}

_ADDITIVE = {"+": _add, "-": _subtract}

_MULTIPLICATIVE = {"*": _multiply, "/": _divide, "%": _modulo}


def get_member(target: Any, key: Any) -> Any:
    """Read a member of a context value.

    Mappings are read by key, strings and sequences by integer index or
    ``length``. Anything else has no members.

    Raises:
        EvaluationError: When reading from null or undefined.
    """
    if _is_nullish(target):
        raise EvaluationError(
            f"Cannot read property {to_string(key)!r} of {to_string(target)}"
        )
    if isinstance(target, Mapping):
        if key in target:
            return target[key]
        return target.get(to_string(key), UNDEFINED)
    if isinstance(target, (str, list, tuple)):
        if key == "length":
            return len(target)
        index = to_number(key) if not isinstance(key, bool) else math.nan
        if _is_number(index) and not math.isnan(index) and float(index).is_integer():
            index = int(index)
            if 0 <= index < len(target):
                return target[index]
    return UNDEFINED


# -- parser ------------------------------------------------------------------


def _constant(value: Any) -> Node:
    return lambda scope: value


def _variable(name: str) -> Node:
    def resolve(scope: Context) -> Any:
        if name not in scope:
            raise EvaluationError(f"{name} is not defined")
        return scope[name]

    return resolve


def _binary(operation: Callable[[Any, Any], Any], left: Node, right: Node) -> Node:
    return lambda scope: operation(left(scope), right(scope))


def _unary(operator: str, operand: Node) -> Node:
    if operator == "!":
        return lambda scope: not truthy(operand(scope))
    if operator == "-":
        return lambda scope: -to_number(operand(scope))
    return lambda scope: to_number(operand(scope))


def _logical_and(left: Node, right: Node) -> Node:
    def evaluate_and(scope: Context) -> Any:
        value = left(scope)
        return right(scope) if truthy(value) else value

    return evaluate_and


def _logical_or(left: Node, right: Node) -> Node:
    def evaluate_or(scope: Context) -> Any:
        value = left(scope)
        return value if truthy(value) else right(scope)

    return evaluate_or


def _conditional(test: Node, consequent: Node, alternate: Node) -> Node:
    return lambda scope: consequent(scope) if truthy(test(scope)) else alternate(scope)


def _member(target: Node, key: Node) -> Node:
    return lambda scope: get_member(target(scope), key(scope))


def _call(callee: Node, arguments: Sequence[Node], label: str) -> Node:
    def invoke(scope: Context) -> Any:
        function = callee(scope)
        if not callable(function):
            raise EvaluationError(f"{label} is not a function")
        values = [argument(scope) for argument in arguments]
        try:
            return function(*values)
        except EvaluationError:
            raise
        except Exception as e:
            raise EvaluationError(f"{label} failed: {e}") from e

    return invoke


class _Parser:
    """Recursive-descent parser compiling tokens into evaluation closures.

    Precedence, lowest first: ternary, ||, &&, equality, relational,
    additive, multiplicative, unary, postfix (member, index, call).
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0

    def parse(self) -> Node:
        if self._peek().kind == "eof":
            raise EvaluationError("Empty expression")
        node = self._ternary()
        token = self._peek()
        if token.kind != "eof":
            raise EvaluationError(
                f"Unexpected token {token.value!r} at position {token.pos}"
            )
        return node

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _peek_op(self) -> Optional[str]:
        token = self._peek()
        return token.value if token.kind == "op" else None

    def _accept(self, operator: str) -> bool:
        if self._peek_op() == operator:
            self.index += 1
            return True
        return False

    def _expect(self, operator: str) -> None:
        if not self._accept(operator):
            token = self._peek()
            found = "end of expression" if token.kind == "eof" else repr(token.value)
            raise EvaluationError(f"Expected {operator!r} but found {found}")

    def _ternary(self) -> Node:
        test = self._or()
        if self._accept("?"):
            consequent = self._ternary()
            self._expect(":")
            alternate = self._ternary()
            return _conditional(test, consequent, alternate)
        return test

    def _or(self) -> Node:
        left = self._and()
        while self._accept("||"):
            left = _logical_or(left, self._and())
        return left

    def _and(self) -> Node:
        left = self._binary_level(self._relational, _EQUALITY)
        while self._accept("&&"):
            left = _logical_and(left, self._binary_level(self._relational, _EQUALITY))
        return left

    def _relational(self) -> Node:
        return self._binary_level(self._additive, _RELATIONAL)

    def _additive(self) -> Node:
        return self._binary_level(self._multiplicative, _ADDITIVE)

    def _multiplicative(self) -> Node:
        return self._binary_level(self._unary, _MULTIPLICATIVE)

    def _binary_level(
        self,
        operand: Callable[[], Node],
        operators: Dict[str, Callable[[Any, Any], Any]],
    ) -> Node:
        left = operand()
        while self._peek_op() in operators:
            operation = operators[self._advance().value]
            left = _binary(operation, left, operand())
        return left

    def _unary(self) -> Node:
        operator = self._peek_op()
        if operator in ("!", "-", "+"):
            self._advance()
            return _unary(operator, self._unary())
        return self._postfix()

    def _postfix(self) -> Node:
        node, label = self._primary()
        while True:
            if self._accept("."):
                token = self._advance()
                if token.kind != "name":
                    raise EvaluationError(
                        f"Expected property name at position {token.pos}"
                    )
                node = _member(node, _constant(token.value))
                label = f"{label}.{token.value}"
            elif self._accept("["):
                key = self._ternary()
                self._expect("]")
                node = _member(node, key)
                label = f"{label}[...]"
            elif self._accept("("):
                node = _call(node, self._arguments(), label)
                label = f"{label}(...)"
            else:
                return node

    def _arguments(self) -> List[Node]:
        arguments: List[Node] = []
        if self._accept(")"):
            return arguments
        while True:
            arguments.append(self._ternary())
            if self._accept(")"):
                return arguments
            self._expect(",")

    def _primary(self):
        token = self._advance()
        if token.kind in ("number", "string"):
            return _constant(token.value), repr(token.value)
        if token.kind == "name":
            if token.value in _LITERALS:
                return _constant(_LITERALS[token.value]), token.value
            return _variable(token.value), token.value
        if token.kind == "op" and token.value == "(":
            node = self._ternary()
            self._expect(")")
            return node, "(...)"
        if token.kind == "eof":
            raise EvaluationError("Unexpected end of expression")
        raise EvaluationError(
            f"Unexpected token {token.value!r} at position {token.pos}"
        )


class Expression:
    """A parsed inline expression, reusable across contexts.

    Attributes:
        source: The expression text as written in the template.
    """

    def __init__(self, source: str):
        self.source = source
        try:
            self._node = _Parser(tokenize(source)).parse()
        except RecursionError as e:
            raise EvaluationError("Expression is nested too deeply") from e

    def evaluate(self, context: Context) -> Any:
        """Evaluate against a variable context.

        Raises:
            EvaluationError: On any failure during evaluation.
        """
        try:
            return self._node(context)
        except EvaluationError:
            raise
        except (TypeError, ValueError, OverflowError, RecursionError) as e:
            raise EvaluationError(f"Cannot evaluate {self.source!r}: {e}") from e

    def __repr__(self) -> str:
        return f"Expression({self.source!r})"


@lru_cache(maxsize=1024)
def compile_expression(source: str) -> Expression:
    """Parse an expression, reusing earlier parses of the same text."""
    return Expression(source.strip())


def evaluate(source: str, context: Optional[Context] = None) -> Any:
    """Evaluate an expression against a variable context.

    Args:
        source: Expression text, e.g. ``name.first + " " + name.last``.
        context: Variable bindings; the only names the expression can see.

    Returns:
        The expression's value.

    Raises:
        EvaluationError: On syntax errors, undefined names, missing
            functions or any other evaluation failure.
    """
    return compile_expression(source).evaluate(context or {})
