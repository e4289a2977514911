"""Sizing quantity normalization for kbcli arguments."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from fdb.core.errors import InvalidInputError

# kbcli takes storage and memory in Gi as bare numbers
_UNIT_SUFFIXES = ("Gi", "gi")


def normalize_quantity(value: str | int | float) -> str:
    """Strip the unit suffix and render a positive quantity as a bare number.

    Examples:
        "2Gi" -> "2", "0.8Gi" -> "0.8", "3" -> "3"

    Raises:
        InvalidInputError: If the remainder is not a positive decimal
    """
    text = str(value).strip()
    number = text
    for suffix in _UNIT_SUFFIXES:
        if number.endswith(suffix):
            number = number[: -len(suffix)].strip()
            break

    try:
        parsed = Decimal(number)
    except InvalidOperation:
        raise InvalidInputError(
            f"invalid quantity: {text} (expected number or e.g. 2Gi)"
        ) from None

    if not parsed.is_finite() or parsed <= 0:
        raise InvalidInputError(f"invalid quantity: {text} (must be a positive number)")

    return format(parsed.normalize(), "f")


def validate_replicas(value: int | str) -> int:
    """Return replicas as a positive int."""
    try:
        replicas = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"invalid replicas: {value}") from None
    if replicas <= 0:
        raise InvalidInputError(f"invalid replicas: {value} (must be at least 1)")
    return replicas
