"""Blog Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - BlogCreate: title and url required, stripped, non-empty; likes a strict int >= 0,
      default 0 (booleans and numeric strings rejected)
    - BlogUpdate: every field optional, but a supplied field obeys the same rules
      as on create (no explicit null for title/url/likes)
    - Unknown fields (user, owner, id) are ignored, never applied
    - BlogResponse projects the owner to {id, username, name}

Design Decisions:
    - BlogUpdate.changes() uses exclude_unset: an absent field is "leave as is",
      which is what a partial update means
    - to_blog_response() over from_attributes: owner may be absent on fakes and
      the projection is explicit
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


class BlogCreate(BaseModel):
    """Blog creation payload."""
    title: str = Field(min_length=1, max_length=1000)
    url: str = Field(min_length=1, max_length=2000)
    author: str | None = Field(None, max_length=200)
    likes: int = Field(0, ge=0, strict=True)
    comments: list[str] = Field(default_factory=list)

    @field_validator("title", "url")
    @classmethod
    def strip_required(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("likes", mode="before")
    @classmethod
    def default_null_likes(cls, v):
        return 0 if v is None else v


class BlogUpdate(BaseModel):
    """Partial update payload — only the mutable subset is accepted."""
    title: str | None = Field(None, min_length=1, max_length=1000)
    url: str | None = Field(None, min_length=1, max_length=2000)
    author: str | None = Field(None, max_length=200)
    likes: int | None = Field(None, ge=0, strict=True)

    @field_validator("title", "url")
    @classmethod
    def strip_required(cls, v: str | None) -> str | None:
        return v if v is None else _strip_required(v)

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("title", "url", "likes"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CommentCreate(BaseModel):
    """Comment append payload."""
    comment: str = Field(min_length=1, max_length=5000)

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v: str) -> str:
        return _strip_required(v)


class BlogOwner(BaseModel):
    id: UUID
    username: str
    name: str | None = None


class BlogResponse(BaseModel):
    """Blog response — public-facing blog data."""
    id: UUID
    title: str
    author: str | None
    url: str
    likes: int
    comments: list[str]
    user: BlogOwner | UUID


def to_blog_response(blog) -> BlogResponse:
    """Project a stored blog, owner collapsed to {id, username, name} when loaded."""
    owner = getattr(blog, "owner", None)
    user = (
        BlogOwner(id=owner.id, username=owner.username, name=owner.name)
        if owner is not None else blog.user_id
    )
    return BlogResponse(
        id=blog.id,
        title=blog.title,
        author=blog.author,
        url=blog.url,
        likes=blog.likes,
        comments=list(blog.comments),
        user=user,
    )


# --- Statistics ---------------------------------------------------------------

class FavoriteBlogResponse(BaseModel):
    title: str
    author: str | None
    likes: int


class AuthorBlogCountResponse(BaseModel):
    author: str | None
    count: int


class AuthorLikesResponse(BaseModel):
    author: str | None
    likes: int


class BlogStatisticsResponse(BaseModel):
    """Author-level aggregates. Null members mean the collection was empty."""
    total_likes: int
    favorite_blog: FavoriteBlogResponse | None
    most_blogs: AuthorBlogCountResponse | None
    most_likes: AuthorLikesResponse | None
