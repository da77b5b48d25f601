"""
Request schemas for token pages and MemeDrop entries.

Pydantic models accept camelCase keys from the HTTP layer and snake_case
from Python callers.
"""

from typing import Any

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from app.config.business_constants import (
    BUTTON_STYLES,
    DEFAULT_BUTTON_STYLE,
    DEFAULT_FONT_STYLE,
    DEFAULT_THEME,
    FONT_STYLES,
    MAX_CHAIN_LENGTH,
    MIN_TOKEN_ADDRESS_LENGTH,
    MIN_TOKEN_NAME_LENGTH,
    THEMES,
)
from app.config.constants import UPLOADS_URL_PREFIX
from app.utils.exceptions import ValidationError
from app.validators.unified import validate_email


def _normalize_choice(value: Any, allowed: tuple[str, ...], default: str, field: str) -> Any:
    """Map empty values to the default and unknown values to the default."""
    if value is None:
        return default
    if not isinstance(value, str):
        return value  # let pydantic report the type error
    value = value.strip().lower()
    if not value:
        return default
    if value not in allowed:
        logger.warning(f"Unknown {field} {value!r}, using default {default!r}")
        return default
    return value


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class ThemeFields(CamelModel):
    """Theme fields with defaults."""

    theme: str = DEFAULT_THEME
    button_style: str = DEFAULT_BUTTON_STYLE
    font_style: str = DEFAULT_FONT_STYLE

    @field_validator("theme", mode="before")
    @classmethod
    def normalize_theme(cls, v: Any) -> Any:
        return _normalize_choice(v, THEMES, DEFAULT_THEME, "theme")

    @field_validator("button_style", mode="before")
    @classmethod
    def normalize_button_style(cls, v: Any) -> Any:
        return _normalize_choice(v, BUTTON_STYLES, DEFAULT_BUTTON_STYLE, "button style")

    @field_validator("font_style", mode="before")
    @classmethod
    def normalize_font_style(cls, v: Any) -> Any:
        return _normalize_choice(v, FONT_STYLES, DEFAULT_FONT_STYLE, "font style")


class TokenCreate(ThemeFields):
    """Validated token description."""

    token_name: str = Field(min_length=MIN_TOKEN_NAME_LENGTH)
    token_address: str = Field(min_length=MIN_TOKEN_ADDRESS_LENGTH)
    chain: str = Field(min_length=1, max_length=MAX_CHAIN_LENGTH)
    logo_url: str | None = None

    @field_validator("chain")
    @classmethod
    def lowercase_chain(cls, v: str) -> str:
        return v.lower()

    @field_validator("logo_url")
    @classmethod
    def validate_logo_url(cls, v: str | None) -> str | None:
        """Logo must be an absolute http(s) URL or a stored upload path."""
        if not v:
            return None
        if v.startswith(("http://", "https://", f"{UPLOADS_URL_PREFIX}/")):
            return v
        raise ValueError("logoUrl must be an absolute URL or an uploads path")


class ThemeUpdate(CamelModel):
    """Partial theme update; absent fields keep their stored value."""

    theme: str | None = None
    button_style: str | None = None
    font_style: str | None = None

    @field_validator("theme")
    @classmethod
    def normalize_theme(cls, v: str | None) -> str | None:
        return None if v is None else _normalize_choice(v, THEMES, DEFAULT_THEME, "theme")

    @field_validator("button_style")
    @classmethod
    def normalize_button_style(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _normalize_choice(v, BUTTON_STYLES, DEFAULT_BUTTON_STYLE, "button style")

    @field_validator("font_style")
    @classmethod
    def normalize_font_style(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _normalize_choice(v, FONT_STYLES, DEFAULT_FONT_STYLE, "font style")

    def changes(self) -> dict[str, str]:
        """Fields explicitly provided, as model column names."""
        return self.model_dump(exclude_none=True)


class MemeDropEntryCreate(CamelModel):
    """Manual MemeDrop entry."""

    wallet_address: str = Field(min_length=1)
    token_name: str = Field(min_length=1)
    chain: str = Field(min_length=1, max_length=MAX_CHAIN_LENGTH)
    twitter: str | None = None
    email: str | None = None

    @field_validator("twitter", "email", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        if v is None:
            return None
        is_valid, error = validate_email(v)
        if not is_valid:
            raise ValueError(error)
        return v


def parse_model(model: type[CamelModel], data: dict[str, Any]) -> Any:
    """
    Validate data against a schema.

    Args:
        model: Schema class
        data: Raw input

    Returns:
        Validated model instance

    Raises:
        ValidationError: With a field/message list in context["errors"]
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        raise ValidationError(f"Invalid {_describe(model)}", errors=errors) from e


def _describe(model: type[CamelModel]) -> str:
    if model is TokenCreate:
        return "token data"
    if model is ThemeUpdate:
        return "theme data"
    return "entry data"
