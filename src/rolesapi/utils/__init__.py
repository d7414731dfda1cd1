"""Utility helpers for working with SQLAlchemy models and Pydantic schemas."""

from typing import Iterable, Type, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT")
SchemaT = TypeVar("SchemaT", bound=BaseModel)


def model_to_schema(model: ModelT, schema_cls: Type[SchemaT]) -> SchemaT:
    """Convert a SQLAlchemy model instance to a Pydantic schema."""
    return schema_cls.model_validate(model, from_attributes=True)


def models_to_schema(models: Iterable[ModelT], schema_cls: Type[SchemaT]) -> list[SchemaT]:
    """Convert an iterable of SQLAlchemy models to a list of Pydantic schemas."""
    return [model_to_schema(m, schema_cls) for m in models]


def location_for(collection: str, resource_id: int) -> str:
    """Build the Location header value for a newly created resource."""
    return f"/api/{collection}/{resource_id}"


# Primary keys are INTEGER columns; anything outside this range cannot be stored.
MAX_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    """Whether an id fits the integer primary key columns."""
    return 0 < value <= MAX_ID
