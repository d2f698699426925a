from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from tripplanner.integrations.exceptions import ResponseParseError

M = TypeVar("M", bound=BaseModel)


def parse_response(model: Type[M], payload: Any, endpoint: str) -> M:
    """Validate a decoded response body against ``model`` or raise ResponseParseError."""
    if payload is None:
        raise ResponseParseError(f"Empty response from {endpoint}", endpoint=endpoint)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ResponseParseError(
            f"Malformed {model.__name__} from {endpoint}: {e.error_count()} problem(s)",
            endpoint=endpoint,
            errors=e.errors(include_url=False),
        ) from e
