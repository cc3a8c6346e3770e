"""Pydantic models for dispatcher configuration validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DispatcherConfig(BaseModel):
    """Configuration for a Dispatcher.

    Example in config.json:
        {
            "ensure_ascii": false,
            "max_depth": 512,
            "auth_realm": "Billing API"
        }
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    ensure_ascii: bool = False
    """Escape non-ASCII characters in encoded responses."""

    max_depth: int = Field(default=512, ge=1)
    """Maximum nesting depth accepted when encoding or decoding JSON text."""

    allow_nan: bool = False
    """Encode NaN/Infinity as bare literals instead of failing."""

    auth_realm: str = "JSON-RPC"
    """Realm announced in the WWW-Authenticate header on 401 replies."""

    @field_validator("auth_realm")
    @classmethod
    def validate_realm(cls, v: str) -> str:
        """Realm must be non-empty and must not break the quoted header value."""
        if not v.strip():
            raise ValueError("auth_realm must not be empty")
        if '"' in v or "\r" in v or "\n" in v:
            raise ValueError("auth_realm must not contain quotes or line breaks")
        return v
