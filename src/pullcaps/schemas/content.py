"""Pydantic schemas for PushShift content records.

PushShift returns flat records; the author and subreddit columns are
gathered into nested models so that ``comment.author.name`` reads the
way the rest of the library does.
See: https://github.com/pushshift/api
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Author(BaseModel):
    """The author of a Post or Comment."""

    id: str | None = Field(default=None, description="Reddit fullname (t2_...)")
    name: str = Field(description="Reddit username")


class SubReddit(BaseModel):
    """The subreddit a Post or Comment belongs to."""

    id: str = Field(description="Subreddit fullname (t5_...)")
    name: str = Field(description="Subreddit display name")


class Content(BaseModel):
    """Attributes shared by posts and comments."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique ID of the content")
    score: int = Field(default=0, description="Score of the content")
    permalink: str | None = Field(default=None, description="Permalink to the content")
    date: datetime = Field(alias="created_utc", description="When the content was created (UTC)")

    author: Author = Field(description="Who wrote the content")
    subreddit: SubReddit = Field(description="Where the content was posted")

    @model_validator(mode="before")
    @classmethod
    def _nest_flat_columns(cls, data: Any) -> Any:
        """Collect the flat author_* and subreddit_* columns into nested models."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if not isinstance(data.get("author"), dict | Author):
            data["author"] = {
                "name": data.get("author"),
                "id": data.pop("author_fullname", None),
            }
        if not isinstance(data.get("subreddit"), dict | SubReddit):
            data["subreddit"] = {
                "name": data.get("subreddit"),
                "id": data.pop("subreddit_id", None),
            }
        return data

    @property
    def cursor(self) -> int:
        """Pagination position of this record (epoch seconds of creation)."""
        return int(self.date.timestamp())


class Comment(Content):
    """A single comment on a reddit Post.

    Maps to: GET /reddit/comment/search/
    """

    body: str = Field(description="Comment text")
    parent_id: str = Field(description="Fullname of the parent comment or post")
    link_id: str | None = Field(default=None, description="Fullname of the post")


class Post(Content):
    """A single reddit post.

    Maps to: GET /reddit/submission/search/
    """

    title: str = Field(default="", description="Post title")
    content_url: str = Field(alias="url", description="URL of the linked content")
    comment_url: str | None = Field(
        default=None, alias="full_link", description="URL of the comment page"
    )
    self_text: str | None = Field(
        default=None, alias="selftext", description="Text of a self-post"
    )
    num_comments: int = Field(default=0, description="Number of comments")
