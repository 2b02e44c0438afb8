"""
Rule engine for dynamic window placement.

Modules:
- matcher: Decide whether a window satisfies a rule
- dispatcher: Evaluate rules against newly created windows
"""

from .dispatcher import DynamicRuleDispatcher
from .matcher import matches, select_rule

__all__ = [
    "DynamicRuleDispatcher",
    "matches",
    "select_rule",
]
