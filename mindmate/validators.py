"""
Input validation for caller-supplied identifiers

Rejects blank user and session ids before they reach the store, raising the
package's ValidationError instead of pydantic's.
"""

import logging

from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from mindmate.exceptions import ValidationError

logger = logging.getLogger(__name__)


class IdentifierInput(BaseModel):
    """
    A user or session identifier

    Constraints:
    - Must be a string
    - Must not be empty or only whitespace
    """
    value: str

    @field_validator('value')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


def validate_identifier(value, field: str) -> str:
    """
    Validate an identifier and return it unchanged

    Args:
        value: Identifier supplied by the caller
        field: Name reported in the error, e.g. "user_id"

    Raises:
        ValidationError: if the identifier is missing, not a string or blank
    """
    try:
        return IdentifierInput(value=value).value
    except PydanticValidationError as e:
        logger.debug(f"Rejected {field}={value!r}: {e.error_count()} error(s)")
        raise ValidationError(f"{field} must be a non-empty string", field=field, value=value) from e
