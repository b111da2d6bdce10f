# product_api/core.py
import math
from typing import Annotated, Any, Dict, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ApiError

# Messages reported for the first failing field, keyed by JSON field name.
FIELD_MESSAGES: Dict[str, str] = {
    "name": "Product name is required and must be a string.",
    "description": "Description is required and must be a string.",
    "price": "Price is required and must be a non-negative number.",
    "category": "Category is required and must be a string.",
    "inStock": "inStock is required and must be a boolean.",
}

NOT_AN_OBJECT = "Request body must be a JSON object."
EMPTY_PATCH = "At least one product field is required."


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


def _check_price(value):
    if value is None:
        return value
    if isinstance(value, bool):
        raise ValueError("price must be a number")
    # ints may exceed float range, so only floats are checked for inf/nan
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("price must be finite")
    if isinstance(value, (int, float)) and value < 0:
        raise ValueError("price must be non-negative")
    return value


# ---------------------------
# Pydantic schemas
# ---------------------------
class ProductIn(BaseModel):
    # strict: "12" is not a price and "true" is not a boolean
    model_config = ConfigDict(strict=True, extra="ignore")

    name: NonBlankStr
    description: NonBlankStr
    price: Union[int, float]
    category: NonBlankStr
    in_stock: bool = Field(alias="inStock")

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value):
        return _check_price(value)


class ProductPatch(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    name: Optional[NonBlankStr] = None
    description: Optional[NonBlankStr] = None
    price: Optional[Union[int, float]] = None
    category: Optional[NonBlankStr] = None
    in_stock: Optional[bool] = Field(default=None, alias="inStock")

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value):
        return _check_price(value)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ---------------------------
# Validation
# ---------------------------
def _first_violation(exc: ValidationError) -> ApiError:
    first = exc.errors()[0]
    field = first["loc"][0] if first["loc"] else None
    return ApiError.validation(FIELD_MESSAGES.get(field, first["msg"]))


def validate_product(payload: Any) -> ProductIn:
    """Check a full product payload; raise on the first field that fails.

    Fields are checked in order name, description, price, category, inStock.
    """
    if not isinstance(payload, dict):
        raise ApiError.validation(NOT_AN_OBJECT)
    try:
        return ProductIn.model_validate(payload)
    except ValidationError as e:
        raise _first_violation(e) from None


def validate_product_patch(payload: Any) -> ProductPatch:
    """Check a partial payload. Absent or null fields are left alone."""
    if not isinstance(payload, dict):
        raise ApiError.validation(NOT_AN_OBJECT)
    try:
        patch = ProductPatch.model_validate(payload)
    except ValidationError as e:
        raise _first_violation(e) from None
    if not patch.changes():
        raise ApiError.validation(EMPTY_PATCH)
    return patch
