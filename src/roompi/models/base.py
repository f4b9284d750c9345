"""Data model base classes and validators for roompi.

This module provides the shared PayloadModel base used for validating the
loosely-typed status payload into structured, immutable models.
"""
from collections.abc import Callable
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

ValidatorCallable = Callable[..., Any]


class PayloadModel(BaseModel):
    """Base model for everything decoded from the status endpoint.

    The server speaks camelCase JSON; attributes are snake_case and either
    spelling is accepted on input. Instances are frozen so a decoded bundle
    can only ever be replaced, never patched in place.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @staticmethod
    def fallback_validator(field_name: str, default: Any) -> ValidatorCallable:
        """Factory for validators that swallow decode failures of one field.

        Non-critical fields (display hints and the like) must not abort the
        decode of the surrounding record. The returned validator tries the
        normal validation and substitutes ``default`` if it fails.

        Args:
            field_name: The field name to validate
            default: Value used when the raw value cannot be decoded

        Returns:
            A wrap validator for the specified field
        """

        @field_validator(field_name, mode="wrap")
        def validate_with_fallback(
            cls: type[Any], v: Any, handler: ValidatorFunctionWrapHandler
        ) -> Any:
            if v is None:
                return default
            try:
                return handler(v)
            except ValidationError:
                return default

        return validate_with_fallback

    @staticmethod
    def timestamp_validator(field_name: str) -> ValidatorCallable:
        """Factory for optional ISO-8601 timestamp validators.

        PHP backends emit an empty string instead of null when no timestamp
        is known; treat that as missing.

        Args:
            field_name: The field name to validate

        Returns:
            A validator method for the specified field
        """

        @field_validator(field_name, mode="before")
        def validate_timestamp(cls: type[Any], v: Any) -> Any:
            if isinstance(v, str) and not v.strip():
                return None
            return v

        return validate_timestamp
