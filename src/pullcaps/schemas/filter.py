"""Immutable query filter for PushShift listing endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pullcaps.pushshift.exceptions import ConfigurationError

from .enums import SortDirection


class FilterOptions(BaseModel):
    """Validated option set held by a Filter."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    author: str | None = Field(default=None, min_length=1, description="Restrict to one author")
    subreddit: str | None = Field(
        default=None, min_length=1, description="Restrict to one community"
    )
    before: datetime | None = Field(default=None, description="Only content created before")
    after: datetime | None = Field(default=None, description="Only content created after")
    sort: SortDirection = Field(default=SortDirection.DESC, description="Ordering by time")
    size: int | None = Field(default=None, ge=1, description="Page size hint")

    @field_validator("before", "after")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        """Treat naive datetimes as UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_time_window(self) -> Self:
        if self.before is not None and self.after is not None and self.after >= self.before:
            raise ValueError("'after' must be earlier than 'before'")
        return self


class Filter:
    """Used to filter a particular query down in some way.

    Every builder method returns a new Filter; an instance never changes
    once created, so a filter handed to a stream stays fixed for that
    stream's lifetime.

    Usage:
        query = Filter().subreddit("askreddit").size(50)
        query = Filter(author="reddit", sort="asc")

    Raises:
        ConfigurationError: On unknown, invalid or conflicting options.
    """

    __slots__ = ("_options",)

    def __init__(self, **options: Any) -> None:
        unknown = sorted(set(options) - set(FilterOptions.model_fields))
        if unknown:
            raise ConfigurationError(f"Unrecognized filter option(s): {', '.join(unknown)}")
        try:
            options_model = FilterOptions(**options)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid filter: {e}") from e
        object.__setattr__(self, "_options", options_model)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Filter is immutable; builder methods return a new Filter")

    @classmethod
    def new(cls) -> Filter:
        """Create an empty filter."""
        return cls()

    @property
    def options(self) -> FilterOptions:
        """The validated options of this filter."""
        return self._options

    # -------------------------------------------------------------------------
    # Builder
    # -------------------------------------------------------------------------
    def author(self, author: str) -> Filter:
        """Restrict results to content written by ``author``."""
        return self._with(author=author)

    def subreddit(self, subreddit: str) -> Filter:
        """Restrict results to a named community."""
        return self._with(subreddit=subreddit)

    def before(self, before: datetime) -> Filter:
        """Only return content created before ``before``."""
        return self._with(before=before)

    def after(self, after: datetime) -> Filter:
        """Only return content created after ``after``."""
        return self._with(after=after)

    def sort(self, sort: SortDirection | str) -> Filter:
        """Set the ordering direction by creation time."""
        return self._with(sort=sort)

    def size(self, size: int) -> Filter:
        """Set the page size hint (bounds request cost, not stream length)."""
        return self._with(size=size)

    def _with(self, **changes: Any) -> Filter:
        return Filter(**{**self._options.model_dump(exclude_defaults=True), **changes})

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------
    def to_params(self) -> dict[str, str | int]:
        """Render the filter as PushShift query parameters.

        Datetimes become epoch seconds. The page size is left to the
        caller, which knows the configured default.
        """
        opts = self._options
        params: dict[str, str | int] = {"sort": opts.sort.value}
        if opts.author is not None:
            params["author"] = opts.author
        if opts.subreddit is not None:
            params["subreddit"] = opts.subreddit
        if opts.before is not None:
            params["before"] = int(opts.before.timestamp())
        if opts.after is not None:
            params["after"] = int(opts.after.timestamp())
        return params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return self._options == other._options

    def __hash__(self) -> int:
        return hash(self._options)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{k}={v!r}" for k, v in self._options.model_dump(exclude_defaults=True).items()
        )
        return f"Filter({fields})"
