"""Catalogue DTOs handed from the API layer to ``ProductService``."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateProductDTO(BaseModel):
    """New catalogue entry.

    SKUs are normalised to upper case so lookups are case-insensitive.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    description: str = ""
    stock_quantity: int = Field(default=0, ge=0)

    @field_validator("sku")
    @classmethod
    def normalise_sku(cls, v: str) -> str:
        return v.upper()

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v


class UpdateProductDTO(BaseModel):
    """Partial catalogue edit; ``None`` leaves a field unchanged.

    The SKU is the product's identity and cannot be edited.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    description: str | None = None
    stock_quantity: int | None = Field(default=None, ge=0)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)
