"""Domain service: Line-item selection validation.

Checks raw ``(catalog_id, quantity)`` selections before anything touches
the store. Every violation is collected so the caller can display the
complete list instead of fixing one error per round-trip.
"""

from __future__ import annotations

from collections.abc import Sequence

from autorepair.domain.exceptions import FieldError
from autorepair.domain.model.value_objects import MAX_QUANTITY, MIN_QUANTITY


def validate_selections(
    selections: Sequence[tuple[int, int]],
    *,
    label: str = "service",
    field: str = "service_selections",
    required: bool = True,
) -> list[FieldError]:
    """Return all violations found in *selections* (empty list if valid).

    Positions in messages are 1-based, matching what the user sees.
    """
    errors: list[FieldError] = []

    if not selections:
        if required:
            errors.append(FieldError(field, f"At least one {label} is required"))
        return errors

    seen: set[int] = set()
    for position, (item_id, quantity) in enumerate(selections, start=1):
        item_field = f"{field}[{position - 1}]"
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            errors.append(
                FieldError(
                    f"{item_field}.quantity",
                    f"Quantity of {label} #{position} must be a whole number",
                )
            )
        elif quantity < MIN_QUANTITY:
            errors.append(
                FieldError(
                    f"{item_field}.quantity",
                    f"Quantity of {label} #{position} must be at least {MIN_QUANTITY}",
                )
            )
        elif quantity > MAX_QUANTITY:
            errors.append(
                FieldError(
                    f"{item_field}.quantity",
                    f"Quantity of {label} #{position} cannot exceed {MAX_QUANTITY:,}",
                )
            )

        if item_id in seen:
            errors.append(
                FieldError(
                    f"{item_field}.id",
                    f"{label.capitalize()} {item_id} is selected more than once",
                )
            )
        seen.add(item_id)

    return errors


def validate_mechanic_ids(
    employee_ids: Sequence[int],
    field: str = "mechanic_ids",
) -> list[FieldError]:
    """Mechanics carry no quantity; the only rule is one assignment each."""
    errors: list[FieldError] = []
    seen: set[int] = set()
    for employee_id in employee_ids:
        if employee_id in seen:
            errors.append(
                FieldError(field, f"Mechanic {employee_id} is assigned more than once")
            )
        seen.add(employee_id)
    return errors
