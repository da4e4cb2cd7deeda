"""Shared Pydantic data models for the SmartStore harvester.

These models define the data contracts between the vendor API, the
harvest pipeline, and the persisted per-channel store.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# === Enums ===

class ProductTag(str, Enum):
    """Vendor-curated product markers, in the order they are applied."""
    BEST = "BEST"
    NEW = "NEW"


# === Channel lookup ===

class ChannelInfo(BaseModel):
    """Resolved storefront channel plus the special-product snapshot.

    Built once per run and never mutated; the id sets reflect the server
    state at resolution time.
    """
    model_config = ConfigDict(frozen=True)

    channel_uid: str
    channel_name: str
    best_product_ids: frozenset[int] = frozenset()
    new_product_ids: frozenset[int] = frozenset()

    def tags_for(self, product_id: int) -> list[ProductTag]:
        """Return the tags for a product id, BEST before NEW."""
        tags: list[ProductTag] = []
        if product_id in self.best_product_ids:
            tags.append(ProductTag.BEST)
        if product_id in self.new_product_ids:
            tags.append(ProductTag.NEW)
        return tags


# === Vendor listing (narrow read view) ===

class BenefitsView(BaseModel):
    """Discount block of a listing record."""
    model_config = ConfigDict(populate_by_name=True)

    discounted_sale_price: int | float | None = Field(
        default=None, alias="discountedSalePrice"
    )
    mobile_discounted_sale_price: int | float | None = Field(
        default=None, alias="mobileDiscountedSalePrice"
    )


class ReviewAmount(BaseModel):
    """Review statistics block of a listing record."""
    model_config = ConfigDict(populate_by_name=True)

    total_review_count: int | None = Field(default=None, alias="totalReviewCount")


class RawProduct(BaseModel):
    """The fields of a vendor listing record that the harvester reads.

    Everything else the vendor sends (delivery info, images, category
    navigation, ...) is kept untyped in ``extras``.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int | None = None
    product_no: int | None = Field(default=None, alias="productNo")
    name: str | None = None
    sale_price: int | float | None = Field(default=None, alias="salePrice")
    benefits_view: BenefitsView | None = Field(default=None, alias="benefitsView")
    review_amount: ReviewAmount | None = Field(default=None, alias="reviewAmount")

    @property
    def extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ListingPage(BaseModel):
    """Envelope of one page of the channel product listing."""
    model_config = ConfigDict(populate_by_name=True)

    sort_type: str | None = Field(default=None, alias="sortType")
    page: int | str | None = None
    total_count: int = Field(alias="totalCount", ge=0)
    simple_products: list[Any] = Field(default_factory=list, alias="simpleProducts")

    @field_validator("simple_products", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# === Persisted record ===

class NormalizedProduct(BaseModel):
    """Compact product record persisted per channel, keyed by ``id``."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    product_no: str = Field(alias="productNo")
    name: str = ""
    url: str
    sale_price: int | float = Field(default=0, alias="salePrice")
    discounted_sale_price: int | float = Field(default=0, alias="discountedSalePrice")
    mobile_discounted_sale_price: int | float = Field(
        default=0, alias="mobileDiscountedSalePrice"
    )
    total_review_count: int = Field(default=0, alias="totalReviewCount")
    tags: list[ProductTag] = Field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return ProductTag.NEW in self.tags

    def to_record(self) -> dict[str, Any]:
        """Flat JSON-ready dict with the vendor-style camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")
