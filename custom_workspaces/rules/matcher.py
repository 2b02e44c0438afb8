"""Rule matching for window descriptors.

A rule constrains the application id (exact, case-sensitive) and/or the
window title (case-insensitive regex, substring search). Both constraints
must hold when present; a rule with neither matches every window.
"""

import re
from typing import Iterable, Optional

from ..errors import ErrorReporter, RuleCompilationError
from ..models import Rule, WindowDescriptor


def _compile_title_pattern(pattern: str, reporter: Optional[ErrorReporter]) -> Optional[re.Pattern]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        if reporter is not None:
            reporter.report_once(f"regex:{pattern}", RuleCompilationError(pattern, str(e)))
        return None


def matches(window: WindowDescriptor, rule: Rule, reporter: Optional[ErrorReporter] = None) -> bool:
    """Check if `rule` applies to `window`.

    Patterns are compiled on every call; an invalid pattern makes the rule
    never match and is reported once per reporter.

    Examples:
        >>> rule = Rule.model_validate({"match": {"titleRegex": "^Terminal"}})
        >>> matches(WindowDescriptor(app_id=None, title="terminal - zsh"), rule)
        True
    """
    target_app_id = rule.match.app_id
    title_regex = rule.match.title_regex

    if target_app_id:
        if not window.app_id or window.app_id != target_app_id:
            return False

    if title_regex:
        compiled = _compile_title_pattern(title_regex, reporter)
        if compiled is None:
            return False
        if not compiled.search(window.title or ""):
            return False

    return True


def select_rule(
    window: WindowDescriptor,
    rules: Iterable[Rule],
    reporter: Optional[ErrorReporter] = None
) -> Optional[Rule]:
    """Return the first rule matching `window`, in declared order."""
    for rule in rules:
        if matches(window, rule, reporter):
            return rule
    return None
