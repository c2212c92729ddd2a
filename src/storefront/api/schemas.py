"""Pydantic request schemas for the storefront API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Catalogue ---


class ImageIn(CamelModel):
    url: str = Field(..., max_length=500)
    alt: str | None = Field(None, max_length=255)


class DimensionsIn(CamelModel):
    length: float | None = Field(None, ge=0)
    width: float | None = Field(None, ge=0)
    height: float | None = Field(None, ge=0)


class CreateCategoryRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"name": "Gift Sets", "description": "Ready-to-gift bundles"}]},
    )

    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(None, max_length=500)
    image: str | None = Field(None, max_length=500)


class UpdateCategoryRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=500)
    image: str | None = Field(None, max_length=500)
    clear_image: bool = False
    is_active: bool | None = None


class CreateProductRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Hand-knit Baby Blanket",
                    "description": "Soft merino blanket, 80x100cm.",
                    "price": 1499,
                    "stock": 12,
                    "category": "<category id>",
                    "colors": ["Cream", "Sage"],
                    "images": [{"url": "https://images.example.com/blanket.jpg", "alt": "Blanket"}],
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    category: str
    sku: str | None = Field(None, max_length=50)
    status: str | None = None
    colors: list[str] | None = None
    sizes: list[str] | None = None
    materials: list[str] | None = None
    tags: list[str] | None = None
    images: list[ImageIn] | None = None
    weight: float | None = Field(None, ge=0)
    dimensions: DimensionsIn | None = None
    is_featured: bool = False


class UpdateProductRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=2000)
    price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    category: str | None = None
    status: str | None = None
    colors: list[str] | None = None
    sizes: list[str] | None = None
    materials: list[str] | None = None
    tags: list[str] | None = None
    images: list[ImageIn] | None = None
    weight: float | None = Field(None, ge=0)
    dimensions: DimensionsIn | None = None
    is_featured: bool | None = None


# --- Cart ---


class CartItemRequest(CamelModel):
    product_id: str
    quantity: int = 1
    selected_color: str | None = None
    selected_size: str | None = None


# --- Checkout ---


class CheckoutItem(CamelModel):
    product_id: str | None = None
    name: str | None = None
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    image: str | None = None
    description: str | None = None
    selected_color: str | None = None
    selected_size: str | None = None


class CreateSessionRequest(CamelModel):
    cart_items: list[CheckoutItem] = Field(default_factory=list)
    email: str | None = None
    guest_email: str | None = None


# --- Orders ---


class UpdateOrderStatusRequest(CamelModel):
    status: str
    tracking_number: str | None = Field(None, max_length=100)


# --- Reviews ---


class CreateReviewRequest(CamelModel):
    reviewer_name: str | None = Field(None, max_length=50)
    reviewer_email: str | None = Field(None, max_length=254)
    rating: int | None = None
    title: str | None = Field(None, max_length=100)
    comment: str | None = Field(None, max_length=1000)


class UpdateReviewRequest(CamelModel):
    rating: int | None = None
    title: str | None = Field(None, max_length=100)
    comment: str | None = Field(None, max_length=1000)


class ApproveReviewRequest(CamelModel):
    is_approved: bool
