import logging
from typing import Any, Mapping, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from datagate.common.errors import ValidationError


logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_array(
    data: Mapping[str, Any],
    schema: type[SchemaT],
    message: Optional[str] = None,
) -> SchemaT:
    """
    Validate a mapping against a pydantic schema.

    Raises:
        ValidationError: with the pydantic error list under details["errors"]
    """
    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        logger.info("Validation failed for %s: %s", schema.__name__, errors)
        raise ValidationError(
            message=message or f"Invalid {schema.__name__} payload",
            details={"errors": errors},
        ) from e


def validate(request: Any, schema: type[SchemaT], message: Optional[str] = None) -> SchemaT:
    """Validate request-like input (mapping or object exposing query_params)."""
    data = getattr(request, "query_params", request)
    return validate_array(data, schema, message)
