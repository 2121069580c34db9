"""
Payload validation for companies, products and stock movements.

Every function takes raw, untyped input (typically a decoded JSON body)
and returns either the normalized pydantic model or a ``ValidationFailed``
describing the first offending field. Nothing here touches the database.
"""
from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from schemas.company import CompanyCreate, CompanyUpdate
from schemas.product import ProductCreate, ProductUpdate
from schemas.stock import StockMovementCreate
from services.results import ValidationFailed

M = TypeVar("M", bound=BaseModel)


def _validate(schema: Type[M], data: Any) -> Union[M, ValidationFailed]:
    if not isinstance(data, Mapping):
        return ValidationFailed(field="__root__", reason="Expected an object")
    try:
        return schema.model_validate(dict(data))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "__root__"
        return ValidationFailed(field=field, reason=first["msg"])


def validate_company(data: Any, partial: bool = False) -> Union[CompanyCreate, CompanyUpdate, ValidationFailed]:
    return _validate(CompanyUpdate if partial else CompanyCreate, data)


def validate_product(data: Any) -> Union[ProductCreate, ValidationFailed]:
    return _validate(ProductCreate, data)


def validate_product_patch(data: Any) -> Union[ProductUpdate, ValidationFailed]:
    return _validate(ProductUpdate, data)


def validate_movement(data: Any) -> Union[StockMovementCreate, ValidationFailed]:
    return _validate(StockMovementCreate, data)
