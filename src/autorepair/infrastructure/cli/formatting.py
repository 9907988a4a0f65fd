"""Shared helpers for CLI output and input parsing."""

from __future__ import annotations

from decimal import Decimal

import click

from autorepair.domain.exceptions import DomainException, ValidationError


def fail(exc: DomainException) -> click.ClickException:
    """Turn a domain error into a ClickException, one line per rejected field."""
    if isinstance(exc, ValidationError) and len(exc.errors) > 1:
        lines = "\n".join(f"  - {error}" for error in exc.errors)
        return click.ClickException(f"Invalid input:\n{lines}")
    return click.ClickException(str(exc))


def money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def parse_pairs(raw: str, label: str) -> list[tuple[int, int]]:
    """Parse '1:2,3:1' into [(1, 2), (3, 1)]. An empty string is no pairs."""
    pairs: list[tuple[int, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid {label} format '{pair}'. Expected 'ID:Quantity'."
            )
        id_str, qty_str = pair.split(":", 1)
        try:
            pairs.append((int(id_str), int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid {label} '{pair}'. ID and quantity must be integers.")
    return pairs


def parse_ids(raw: str, label: str) -> list[int]:
    """Parse '1,2,5' into [1, 2, 5]."""
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise click.BadParameter(f"Invalid {label} list '{raw}'. Expected 'ID,ID'.")
