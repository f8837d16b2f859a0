"""Customer store backed by the ``customers`` table."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Union

from sqlalchemy import delete, func, select

from . import Customer
from .database import DatabaseManager

logger = logging.getLogger(__name__)

CustomerInput = Union[Customer, Mapping[str, str]]


class CustomerRepository:
    """Persistence access for :class:`~src.models.Customer`.

    Database errors are not caught here; they propagate to the caller.
    Objects returned are detached from their session and safe to read after
    the call returns.

    Examples:
        >>> repo = CustomerRepository(db_manager)
        >>> repo.save_all([{"name": "John", "email": "john@example.com"}])
        >>> [c.name for c in repo.find_all()]
        ['John']
    """

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager

    def find_all(self) -> list[Customer]:
        """Return every customer, ordered by id."""
        with self._db.get_session() as session:
            rows = session.execute(select(Customer).order_by(Customer.id))
            return list(rows.scalars().all())

    def count(self) -> int:
        with self._db.get_session() as session:
            return session.execute(select(func.count()).select_from(Customer)).scalar_one()

    def save_all(self, customers: Iterable[CustomerInput]) -> list[Customer]:
        """Insert customers in one transaction and return them with ids.

        Accepts ORM instances or ``{"name": ..., "email": ...}`` mappings.
        Ids are always left to the database.
        """
        entities = [self._to_entity(customer) for customer in customers]
        if not entities:
            return []

        with self._db.get_session() as session:
            session.add_all(entities)
            session.commit()
        logger.debug("Inserted %d customers", len(entities))
        return entities

    def delete_all(self) -> int:
        """Delete every row (the table itself is kept)."""
        with self._db.get_session() as session:
            result = session.execute(delete(Customer))
            session.commit()
        logger.debug("Deleted %d customers", result.rowcount)
        return result.rowcount

    @staticmethod
    def _to_entity(customer: CustomerInput) -> Customer:
        if isinstance(customer, Customer):
            if customer.id is not None:
                raise ValueError("Customer ids are assigned by the database")
            return customer
        return Customer(name=customer["name"], email=customer["email"])
