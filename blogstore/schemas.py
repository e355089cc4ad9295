import math
from collections.abc import Callable
from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from blogstore.models import PostStatus, Role

T = TypeVar("T")
R = TypeVar("R")


# --- User ---

class UserCreate(BaseModel):
    name: str = Field(max_length=150)
    email: str = Field(max_length=255)
    role: Role = Role.ROLE_USER


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    model_config = ConfigDict(from_attributes=True)


# --- Category / Tag ---

class LabelCreate(BaseModel):
    name: str = Field(max_length=100)


class CategoryRead(BaseModel):
    id: int
    name: str
    slug: str
    model_config = ConfigDict(from_attributes=True)


class TagRead(BaseModel):
    # Frozen so tags are hashable and can be collected into sets.
    id: int
    name: str
    slug: str
    model_config = ConfigDict(from_attributes=True, frozen=True)


# --- Post ---

class PostCreate(BaseModel):
    title: str = Field(max_length=300)
    slug: str | None = Field(None, max_length=350)
    short_description: str | None = Field(None, max_length=500)
    content_markdown: str
    status: PostStatus = PostStatus.DRAFT
    category: str = Field(max_length=150)  # category name, get-or-create
    tags: list[Annotated[str, Field(max_length=100)]] = []  # tag names, get-or-create


class PostUpdate(BaseModel):
    title: str = Field(max_length=300)
    short_description: str | None = Field(None, max_length=500)
    content_markdown: str
    status: PostStatus
    category: str = Field(max_length=150)


class PostRead(BaseModel):
    id: int
    title: str
    slug: str
    short_description: str | None
    content_markdown: str
    content_html: str
    status: PostStatus
    category_id: int
    category: CategoryRead
    created_by: int
    author: UserRead
    created_at: datetime
    updated_at: datetime | None = None
    # Transient: populated per query from the post_tags association.
    tags: set[TagRead] = Field(default_factory=set)
    model_config = ConfigDict(from_attributes=True)

    @field_serializer("tags")
    def _serialize_tags(self, tags: set[TagRead]) -> list[TagRead]:
        return sorted(tags, key=lambda t: t.name)


class PostCreated(BaseModel):
    id: int


# --- Comment ---

class CommentCreate(BaseModel):
    post_id: int
    content: str


class CommentRead(BaseModel):
    id: int
    content: str
    post_id: int
    created_by: int
    author: UserRead
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Bulk operations ---

class IdList(BaseModel):
    ids: list[int] = []


# --- Pagination ---

class PagedResult(BaseModel, Generic[T]):
    """
    Read-only slice of an ordered collection plus paging metadata.

    Build it through ``of`` (which recomputes every flag from the totals)
    or ``empty`` (the canonical page returned when nothing matched).
    """

    data: list[T]
    total_elements: int
    page_number: int
    total_pages: int
    is_first: bool
    is_last: bool
    has_next: bool
    has_previous: bool
    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "PagedResult[T]":
        # Both is_first and is_last are False on the empty page.
        return cls(
            data=[],
            total_elements=0,
            page_number=1,
            total_pages=0,
            is_first=False,
            is_last=False,
            has_next=False,
            has_previous=False,
        )

    @classmethod
    def of(
        cls, data: list[T], page_number: int, page_size: int, total_elements: int
    ) -> "PagedResult[T]":
        total_pages = math.ceil(total_elements / page_size)
        return cls(
            data=data,
            total_elements=total_elements,
            page_number=page_number,
            total_pages=total_pages,
            is_first=page_number == 1,
            is_last=page_number >= total_pages or total_pages == 0,
            has_next=page_number < total_pages,
            has_previous=page_number > 1,
        )

    def map(self, converter: Callable[[T], R]) -> "PagedResult[R]":
        """Return a new envelope with converted data and the same metadata."""
        return PagedResult(
            data=[converter(item) for item in self.data],
            total_elements=self.total_elements,
            page_number=self.page_number,
            total_pages=self.total_pages,
            is_first=self.is_first,
            is_last=self.is_last,
            has_next=self.has_next,
            has_previous=self.has_previous,
        )
