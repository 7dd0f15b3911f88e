"""Turn Figma node names into file names.

Every transform is an ordered table of (pattern, replacement) rules so each
step can be tested on its own. Replacements are either a template string or a
callable taking the match.
"""

import re
from typing import Callable, List, Optional, Pattern, Tuple, Union

from figma_icon_sync.config import NamingPolicy, NamingTransform

Replacement = Union[str, Callable[[re.Match], str]]
RuleTable = List[Tuple[Pattern[str], Replacement]]


def _upper_next(match: re.Match) -> str:
    return (match.group(1) or "").upper()


KEBAB_CASE_RULES: RuleTable = [
    (re.compile(r"([a-z])([A-Z])"), r"\1-\2"),
    (re.compile(r"[\s_]+"), "-"),
]

# A separator run is only consumed when a character follows it
CAMEL_WORD_RULES: RuleTable = [
    (re.compile(r"[-_\s]+(.)"), _upper_next),
]

LOWER_FIRST_RULES: RuleTable = [
    (re.compile(r"^(.)"), lambda m: m.group(1).lower()),
]

UPPER_FIRST_RULES: RuleTable = [
    (re.compile(r"^(.)"), lambda m: m.group(1).upper()),
]

# Component identifiers drop trailing separators too
PASCAL_IDENTIFIER_RULES: RuleTable = [
    (re.compile(r"[-_\s]+(.)?"), _upper_next),
    (re.compile(r"^(.)"), lambda m: m.group(1).upper()),
]

SANITIZE_RULES: RuleTable = [
    (re.compile(r'[<>:"/\\|?*]'), "-"),
    (re.compile(r"\s+"), " "),
]

UNSAFE_FILENAME_CHARS = frozenset('<>:"/\\|?*')


def apply_rules(value: str, rules: RuleTable) -> str:
    """Apply each rule in order to the whole string."""
    for pattern, replacement in rules:
        value = pattern.sub(replacement, value)
    return value


def sanitize_for_filesystem(name: str) -> str:
    """
    Make a name safe to use as a file name:
    - Replace < > : " / \\ | ? * with hyphens
    - Collapse whitespace runs to a single space
    - Trim leading/trailing whitespace
    """
    return apply_rules(name, SANITIZE_RULES).strip()


def to_pascal_case(name: str) -> str:
    """Convert a name to a PascalCase identifier.

    Examples:
        arrow-left -> ArrowLeft
        arrow_left_ -> ArrowLeft
        chevron down -> ChevronDown
    """
    return apply_rules(name, PASCAL_IDENTIFIER_RULES)


def transform_name(name: str, policy: Optional[NamingPolicy] = None) -> str:
    """
    Transform a raw icon name according to the naming policy.

    Sanitizing runs after the case transform, since the transform can
    introduce characters that need sanitizing.

    Examples (kebab-case):
        arrow_left_icon -> arrow-left-icon
        ArrowLeft -> arrow-left
    """
    policy = policy or NamingPolicy()

    if policy.transform == NamingTransform.KEBAB_CASE:
        transformed = apply_rules(name, KEBAB_CASE_RULES).lower()
    elif policy.transform == NamingTransform.CAMEL_CASE:
        transformed = apply_rules(apply_rules(name, CAMEL_WORD_RULES), LOWER_FIRST_RULES)
    elif policy.transform == NamingTransform.PASCAL_CASE:
        transformed = apply_rules(apply_rules(name, CAMEL_WORD_RULES), UPPER_FIRST_RULES)
    else:
        transformed = name

    if policy.sanitize:
        transformed = sanitize_for_filesystem(transformed)

    return transformed
