"""Template interpolation.

Replaces the two marker forms found in a template in a single left-to-right
scan:

- ``{{ EXPR }}`` is evaluated against the caller's context and spliced in.
  A failing expression is replaced with the empty string.
- ``[[ KEY : name, ... ]]`` translates KEY with a context narrowed to the
  named variables only; ``[[ KEY ]]`` passes an empty context.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from translation.i18n.errors import EvaluationError
from translation.i18n.expressions import compile_expression, to_display
from translation.i18n.models import Context, narrow_context
from translation.logging import get_module_logger

logger = get_module_logger()

# key, narrowed context -> translated string
NestedResolver = Callable[[str, Dict[str, Any]], str]

MARKER_PATTERN = re.compile(r"\{\{(?P<expr>.*?)\}\}|\[\[(?P<ref>.*?)\]\]", re.DOTALL)


def parse_reference(body: str) -> Optional[Tuple[str, List[str]]]:
    """Split the body of a ``[[...]]`` marker into key and variable names.

    Args:
        body: Marker content, e.g. "SALUTATION:name" or " HACK : a, b ".

    Returns:
        (key, names) or None if the marker names no key.
    """
    key, _, names = body.partition(":")
    key = key.strip()
    if not key:
        return None
    return key, [name.strip() for name in names.split(",") if name.strip()]


def interpolate(template: str, context: Context, resolve_nested: NestedResolver) -> str:
    """Interpolate every marker in a template.

    Never raises for a failing expression; see module docstring.

    Args:
        template: Raw template string.
        context: Variable bindings visible to inline expressions.
        resolve_nested: Callback translating a nested key with a narrowed
            context. Expected to have the active dictionary at hand.

    Returns:
        The interpolated string.
    """

    def substitute(match: "re.Match[str]") -> str:
        expr = match.group("expr")
        if expr is not None:
            return _evaluate_marker(expr, context)

        reference = parse_reference(match.group("ref"))
        if reference is None:
            logger.debug("empty_nested_reference", marker=match.group(0))
            return ""
        key, names = reference
        return resolve_nested(key, narrow_context(context, names))

    return MARKER_PATTERN.sub(substitute, template)


def _evaluate_marker(expr: str, context: Context) -> str:
    try:
        return to_display(compile_expression(expr).evaluate(context))
    except (EvaluationError, RecursionError) as e:
        # Self-containing values cannot be rendered
        logger.debug("expression_evaluation_failed", expression=expr, error=str(e))
        return ""
