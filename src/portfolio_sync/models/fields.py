"""Reusable annotated field types for portfolio frontmatter models."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, AnyUrl, BeforeValidator, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from portfolio_sync.constants.portfolio_constants import (
    MAX_NARRATIVE_LENGTH,
    MAX_TAGLINE_LENGTH,
    MAX_TITLE_LENGTH,
    SLUG_PATTERN,
)

_HTTP_URL_RE = re.compile(r"^https?://")
_ANY_URL = TypeAdapter(AnyUrl)


def _check_image_path_or_url(value: str) -> str:
    if value == "" or value.startswith("/") or _HTTP_URL_RE.match(value):
        return value
    raise ValueError("must be a URL, a local path starting with /, or empty")


def _check_url_or_empty(value: str) -> str:
    if value == "":
        return value
    try:
        _ANY_URL.validate_python(value)
    except PydanticValidationError as exc:
        raise ValueError("must be an absolute URL or empty") from exc
    return value


def _date_to_string(value: Any) -> Any:
    # YAML turns unquoted 2024-05-01 into a date object.
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


Slug = Annotated[str, StringConstraints(pattern=SLUG_PATTERN)]
Title = Annotated[str, StringConstraints(min_length=1, max_length=MAX_TITLE_LENGTH)]
Tagline = Annotated[str, StringConstraints(min_length=1, max_length=MAX_TAGLINE_LENGTH)]
Narrative = Annotated[str, StringConstraints(max_length=MAX_NARRATIVE_LENGTH)]
ImagePathOrUrl = Annotated[str, AfterValidator(_check_image_path_or_url)]
UrlOrEmpty = Annotated[str, AfterValidator(_check_url_or_empty)]
DateString = Annotated[str, BeforeValidator(_date_to_string)]
