"""Customer read endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError

from src.models.repository import CustomerRepository

logger = logging.getLogger(__name__)


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


def build_router(repository: CustomerRepository) -> APIRouter:
    """Create the ``/api/customers`` router around an explicit store."""
    router = APIRouter(prefix="/api/customers", tags=["customers"])

    @router.get("", response_model=list[CustomerOut])
    def list_customers() -> list[CustomerOut]:
        """Return every customer as a JSON array (``[]`` when empty)."""
        try:
            customers = repository.find_all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading customers: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to load customers")
        return [CustomerOut.model_validate(customer) for customer in customers]

    return router
