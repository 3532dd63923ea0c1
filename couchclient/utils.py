"""Utility functions for the CouchDB client."""

from typing import Any, Optional, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from couchclient.exceptions import ResponseParseError, ValidationError

ModelT = TypeVar('ModelT', bound=BaseModel)


def assert_not_empty(value: Optional[Any], name: str) -> None:
    """
    Raise ValidationError if a required value is None or empty.

    Args:
        value: Value to check
        name: Field name used in the error message
    """
    if value is None or (hasattr(value, '__len__') and len(value) == 0):
        raise ValidationError(f"{name} may not be null or empty", field_name=name)


def db_path(db_name: str) -> str:
    """
    Build the URL path of a database.

    Args:
        db_name: Database name (may contain '/', which is escaped)

    Returns:
        Path string (e.g., "/_replicator")
    """
    return f"/{quote(db_name, safe='')}"


def doc_path(db_name: str, doc_id: str) -> str:
    """
    Build the URL path of a document.

    Args:
        db_name: Database name
        doc_id: Document ID

    Returns:
        Path string (e.g., "/_replicator/abc123")
    """
    return f"{db_path(db_name)}/{quote(doc_id, safe='')}"


def parse_model(data: Any, model_cls: Type[ModelT]) -> ModelT:
    """
    Validate decoded JSON into a response model.

    Raises:
        ResponseParseError: If the data does not fit the model
    """
    try:
        return model_cls.model_validate(data)
    except ModelValidationError as e:
        raise ResponseParseError(
            f"Unexpected response body for {model_cls.__name__}: {e.error_count()} error(s)"
        ) from e


def build_model(model_cls: Type[ModelT], **fields: Any) -> ModelT:
    """
    Construct a request model from caller-supplied values.

    Raises:
        ValidationError: If a value has the wrong type or shape
    """
    try:
        return model_cls(**fields)
    except ModelValidationError as e:
        first = e.errors()[0]
        field_name = '.'.join(str(part) for part in first['loc']) or None
        raise ValidationError(
            f"Invalid {model_cls.__name__}: {field_name}: {first['msg']}",
            field_name=field_name,
        ) from e


def as_list(values: tuple) -> list:
    """Accept either varargs or a single iterable of values."""
    if len(values) == 1 and not isinstance(values[0], str) and hasattr(values[0], '__iter__'):
        return list(values[0])
    return list(values)
