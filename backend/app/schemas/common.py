"""
Folio Backend — Shared Schema Building Blocks
===============================================

What:  Base classes for request/response schemas and the response envelope.
Why:   Every body crossing the API boundary is validated against an explicit
       schema; nothing duck-typed gets past a route signature.

Sanitization:
    RequestModel cleans raw JSON before field validation runs:
    - keys starting with '$' or containing '.' are dropped (query-operator
      injection against document stores)
    - strings are trimmed

    Text is stored as submitted, so length limits and slugs see what the
    user typed. ResponseModel turns '<' / '>' into HTML entities when a
    body is serialized, so stored text cannot smuggle markup into the site
    or the admin dashboard.
"""

from typing import Annotated, Any, ClassVar, FrozenSet, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


def sanitize(value: Any) -> Any:
    """Recursively strip operator keys and trim strings."""
    if isinstance(value, dict):
        return {
            key: sanitize(item)
            for key, item in value.items()
            if not (isinstance(key, str) and (key.startswith("$") or "." in key))
        }
    if isinstance(value, list):
        return [sanitize(item) for item in value]
    if isinstance(value, str):
        return value.strip()
    return value


def escape_markup(value: Any) -> Any:
    """Recursively replace '<' and '>' with HTML entities in strings."""
    if isinstance(value, dict):
        return {key: escape_markup(item) for key, item in value.items()}
    if isinstance(value, list):
        return [escape_markup(item) for item in value]
    if isinstance(value, str):
        return value.replace("<", "&lt;").replace(">", "&gt;")
    return value


# Format checked by email-validator; stored lower-cased so lookups match
EmailAddress = Annotated[EmailStr, AfterValidator(str.lower)]


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Base for every request body; see module docstring for sanitization."""

    # Wire names passed through untouched (secrets are hashed, never rendered)
    raw_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _sanitize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return sanitize(data)
        cleaned = sanitize({k: v for k, v in data.items() if k not in cls.raw_fields})
        for key in cls.raw_fields:
            if key in data:
                cleaned[key] = data[key]
        return cleaned


class ResponseModel(CamelModel):
    """Base for resources returned to clients; markup is escaped on output."""

    @model_serializer(mode="wrap")
    # Unannotated return keeps the model fields in the OpenAPI schema
    def _escape_output(self, handler: SerializerFunctionWrapHandler):
        return escape_markup(handler(self))


class Envelope(BaseModel):
    """
    Uniform response wrapper: {success, data?, count?, error?}.

    Subclasses narrow `data` to a concrete schema so OpenAPI docs stay useful.
    """
    success: bool = True


class ErrorEnvelope(Envelope):
    success: bool = False
    error: str = Field(description="Human-readable error description")


class MessageEnvelope(Envelope):
    data: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


def first_error_message(errors: List[dict]) -> str:
    """
    Build a readable message from a pydantic/FastAPI error list.

    Uses the first error only, e.g. "title: String should have at most 100 characters".
    """
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    msg: Optional[str] = err.get("msg")
    if msg and msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    if loc:
        return f"{'.'.join(loc)}: {msg}"
    return msg or "Invalid request"
