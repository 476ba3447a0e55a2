"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items).
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The client sends ``product_id`` and ``quantity``; the unit price is
    resolved by the Service Layer from the product catalogue.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int

    @field_validator("product_id", mode="before")
    @classmethod
    def product_id_as_string(cls, v: object) -> str:
        return str(v) if v is not None else ""

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates that ``items`` contains at least one item.  The same
    product may be listed on several lines; their quantities are checked
    together against stock by the service.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    items: List[CreateOrderItemDTO]

    @field_validator("user_id", mode="before")
    @classmethod
    def user_id_as_string(cls, v: object) -> str:
        return str(v) if v is not None else ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

