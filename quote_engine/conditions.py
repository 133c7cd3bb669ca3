"""
Condition Evaluator

A small predicate language used to gate promotion eligibility. A condition
is a (field, operator, value) triple; `field` is a dotted path into the
quote configuration, written either in the application's camelCase
(`customerType`, `discounts.thirdLineFree`) or in snake_case.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum

from .models import Condition, CustomerType, QuoteConfiguration, Promotion

EQUALS = "equals"
NOT_EQUALS = "not_equals"
GREATER_THAN = "greater_than"
LESS_THAN = "less_than"
GREATER_OR_EQUAL = "greater_or_equal"
LESS_OR_EQUAL = "less_or_equal"
INCLUDES = "includes"

OPERATORS = (EQUALS, NOT_EQUALS, GREATER_THAN, LESS_THAN, GREATER_OR_EQUAL, LESS_OR_EQUAL, INCLUDES)

_MISSING = object()


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def resolve_field(config: QuoteConfiguration, path: str):
    """Resolve a dotted field path against the configuration, or _MISSING."""
    # Derived fields
    if path in ("devices.length", "deviceCount"):
        return len(config.devices)
    if path in ("accessories.length", "accessoryCount"):
        return len(config.accessories)

    value = config
    for part in path.split("."):
        attr = _snake(part)
        if attr.endswith("_e_c"):
            attr = attr[:-4] + "_ec"
        if not hasattr(value, attr):
            return _MISSING
        value = getattr(value, attr)
    if isinstance(value, Enum):
        return value.value
    return value


def _to_number(value):
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return None if number.is_nan() else number


def _to_text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip()


def _equal(left, right) -> bool:
    left_num, right_num = _to_number(left), _to_number(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num
    return _to_text(left) == _to_text(right)


def _members(value) -> list:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [part.strip() for part in str(value).split(",")]


def evaluate(config: QuoteConfiguration, condition: Condition) -> bool:
    """Return True if the configuration satisfies the condition."""
    actual = resolve_field(config, condition.field)
    if actual is _MISSING or actual is None:
        return False

    operator = condition.operator
    expected = condition.value

    if operator == EQUALS:
        return _equal(actual, expected)
    if operator == NOT_EQUALS:
        return not _equal(actual, expected)
    if operator == INCLUDES:
        return any(_equal(actual, member) for member in _members(expected))

    # Ordering operators only compare numbers
    left, right = _to_number(actual), _to_number(expected)
    if left is None or right is None:
        return False
    if operator == GREATER_THAN:
        return left > right
    if operator == LESS_THAN:
        return left < right
    if operator == GREATER_OR_EQUAL:
        return left >= right
    if operator == LESS_OR_EQUAL:
        return left <= right
    return False


def all_conditions_met(config: QuoteConfiguration, conditions) -> bool:
    """Logical AND of every condition. An empty list is always satisfied."""
    return all(evaluate(config, condition) for condition in conditions)


def analyze_promotion(config: QuoteConfiguration, promotion: Promotion) -> tuple[str, list[str]]:
    """
    Classify a promotion against the configuration.

    Returns ("eligible" | "locked" | "hidden", reasons). A promotion is
    hidden when inactive or when it targets another customer type, and
    locked when only actionable requirements (plan, lines, devices) fail.
    """
    if not promotion.is_active:
        return "hidden", []

    reasons = []
    for condition in promotion.conditions:
        if evaluate(config, condition):
            continue
        if condition.field in ("customerType", "customer_type"):
            return "hidden", []
        if condition.field == "plan":
            reasons.append("Upgrade Plan to Unlock")
        elif condition.field == "lines":
            if condition.operator in (GREATER_OR_EQUAL, GREATER_THAN):
                reasons.append(f"Add lines to unlock (Needs {condition.value})")
            else:
                reasons.append("Line requirement not met")
        elif condition.field in ("devices.length", "deviceCount"):
            reasons.append("Device count requirement not met")
        else:
            reasons.append("Requirements not met")

    if reasons:
        return "locked", reasons
    return "eligible", []


def is_standard_customer(config: QuoteConfiguration) -> bool:
    return config.customer_type == CustomerType.STANDARD
