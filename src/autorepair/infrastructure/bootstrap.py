"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from sqlalchemy import Engine

from autorepair.application.create_order import CreateOrderHandler
from autorepair.application.update_order import UpdateOrderHandler
from autorepair.infrastructure.config import Settings, get_settings
from autorepair.infrastructure.persistence.sql_gateway import (
    SqlAlchemyGateway,
    create_store_engine,
)


def store_engine(settings: Settings | None = None) -> Engine:
    settings = settings or get_settings()
    return create_store_engine(
        settings.database_url,
        echo=settings.db_echo,
        busy_timeout=settings.db_busy_timeout,
    )


def gateway(settings: Settings | None = None) -> SqlAlchemyGateway:
    return SqlAlchemyGateway(store_engine(settings))


# Handlers whose pricing depends on configuration.


def create_order_handler(settings: Settings | None = None) -> CreateOrderHandler:
    settings = settings or get_settings()
    return CreateOrderHandler(
        gateway(settings),
        tax_rate=settings.tax_rate,
        include_replacements_in_cost=settings.include_replacements_in_cost,
    )


def update_order_handler(settings: Settings | None = None) -> UpdateOrderHandler:
    settings = settings or get_settings()
    return UpdateOrderHandler(
        gateway(settings),
        tax_rate=settings.tax_rate,
        include_replacements_in_cost=settings.include_replacements_in_cost,
    )
