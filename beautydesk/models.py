"""
beautydesk/models.py – Pydantic v2 request / response schemas for the admin API.

Payload models serialise to the backend's camelCase field names; the admin
API accepts either spelling on input.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _BackendModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_backend(self) -> dict[str, Any]:
        """Dump to the JSON body the backend expects (unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ── Enumerations ──────────────────────────────────────────────────────────────


class ServiceFlag(str, Enum):
    TRENDING_NEAR_YOU = "trending-near-you"
    BEST_SELLER = "best-seller"
    LAST_MINUTE_ADDON = "last-minute-addon"
    PEOPLE_ALSO_AVAILED = "people-also-availed"
    SPA_RETREAT_FOR_WOMEN = "spa-retreat-for-women"
    WHATS_NEW = "whats-new"


# ── Categories ────────────────────────────────────────────────────────────────


class MainCategoryCreate(_BackendModel):
    name: str = Field(..., min_length=1, examples=["Hair"])
    image_url: str = Field(..., min_length=1)


class MainCategoryUpdate(_BackendModel):
    name: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None


class SubCategoryCreate(_BackendModel):
    name: str = Field(..., min_length=1, examples=["Hair Spa"])
    image_url: str = Field(..., min_length=1)
    main_category_id: str = Field(..., min_length=1)


class SubCategoryUpdate(_BackendModel):
    name: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None
    main_category_id: Optional[str] = None


# ── Services ──────────────────────────────────────────────────────────────────


class KeyIngredient(_BackendModel):
    name: str
    description: str = ""
    image_url: str = ""


class ProcedureStep(_BackendModel):
    title: str
    description: str = ""
    image_url: str = ""


class Faq(_BackendModel):
    question: str
    answer: str


class _ServiceDetails(_BackendModel):
    key_ingredients: Optional[list[KeyIngredient]] = None
    benefits: Optional[list[str]] = None
    procedure: Optional[list[ProcedureStep]] = None
    precautions_and_aftercare: Optional[list[str]] = None
    things_to_know: Optional[list[str]] = None
    faqs: Optional[list[Faq]] = None
    is_discounted: Optional[bool] = None
    discount_price: Optional[float] = Field(default=None, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    offer_tags: Optional[list[str]] = None
    duration: Optional[str] = Field(default=None, examples=["45 mins"])
    included_items: Optional[list[str]] = None
    popularity: Optional[str] = None
    is_new_launch: Optional[bool] = None
    category_tags: Optional[list[str]] = None
    brand: Optional[str] = None
    professional_types: Optional[list[str]] = None
    service_charge: Optional[float] = Field(default=None, ge=0)
    product_cost: Optional[float] = Field(default=None, ge=0)
    disposable_cost: Optional[float] = Field(default=None, ge=0)


class ServiceCreate(_ServiceDetails):
    name: str = Field(..., min_length=1, examples=["Keratin Treatment"])
    price: float = Field(..., ge=0)
    description: str = ""
    image_url: str = Field(..., min_length=1)
    sub_category_id: str = Field(..., min_length=1)


class ServiceUpdate(_ServiceDetails):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    sub_category_id: Optional[str] = None


class ServiceFlagToggle(BaseModel):
    enabled: bool


class ServicesBySubCategoriesRequest(_BackendModel):
    sub_category_ids: list[str] = Field(..., min_length=1)


# ── Auth ──────────────────────────────────────────────────────────────────────


class LoginRequest(_BackendModel):
    phone_number: str = Field(..., min_length=4, examples=["9876543210"])


class VerifyLoginRequest(_BackendModel):
    phone_number: str = Field(..., min_length=4)
    otp: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str
    role: str
    user_id: str = ""
    phone_number: str
    is_admin: bool


class ProfileUpdate(_BackendModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None


# ── Results ───────────────────────────────────────────────────────────────────


class FeatureUnavailable(BaseModel):
    """Returned instead of data when the backend has no endpoint for a feature."""

    available: Literal[False] = False
    feature: str
    reason: str


class ApiErrorBody(BaseModel):
    status: int
    message: str


class DashboardStats(BaseModel):
    total_main_categories: int = 0
    total_sub_categories: int = 0
    total_services: int = 0
    profile: Optional[dict[str, Any]] = None
    errors: dict[str, ApiErrorBody] = Field(default_factory=dict)
    rate_limited: bool = Field(
        default=False,
        description="True when every collection failed to load; usually a 429 from the backend.",
    )


class CacheClearResponse(BaseModel):
    cleared: str = Field(examples=["services", "all"])


# ── Health ────────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str
    backend_configured: bool


class ReadinessResponse(BaseModel):
    ready: bool
    checks: dict[str, Any]
