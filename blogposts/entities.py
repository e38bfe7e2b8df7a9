"""
Read-only domain shapes handed to page and feed collaborators.

Attributes use Python naming; :py:meth:`to_dict` renders the camelCase
mapping used on the wire.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from django.utils import timezone as django_timezone

UNKNOWN_AUTHOR_NAME = "Unknown Author"


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    avatar: Optional[str]
    bio: Optional[str]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "bio": self.bio,
            "createdAt": _isoformat(self.created_at),
        }


def placeholder_author(author_id: int) -> User:
    """The author substituted when a post or comment author row is missing."""
    return User(
        id=author_id,
        name=UNKNOWN_AUTHOR_NAME,
        email="",
        avatar=None,
        bio=None,
        created_at=django_timezone.now(),
    )


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    slug: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "createdAt": _isoformat(self.created_at),
        }


@dataclass(frozen=True)
class PostCategory:
    post_id: int
    category_id: int
    category: Category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "postId": self.post_id,
            "categoryId": self.category_id,
            "category": self.category.to_dict(),
        }


@dataclass(frozen=True)
class Comment:
    id: int
    content: str
    post_id: int
    author_id: int
    created_at: datetime
    author: User

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "postId": self.post_id,
            "authorId": self.author_id,
            "createdAt": _isoformat(self.created_at),
            "author": self.author.to_dict(),
        }


@dataclass(frozen=True)
class Post:
    id: int
    title: str
    slug: str
    excerpt: Optional[str]
    content: str
    cover_image: Optional[str]
    author_id: int
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, instance) -> "Post":
        return cls(
            id=instance.pk,
            title=instance.title,
            slug=instance.slug,
            excerpt=instance.excerpt,
            content=instance.content,
            cover_image=instance.cover_image,
            author_id=instance.author_id,
            published_at=instance.published_at,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "content": self.content,
            "coverImage": self.cover_image,
            "authorId": self.author_id,
            "publishedAt": _isoformat(self.published_at),
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class PostWithRelations(Post):
    author: User
    post_categories: Tuple[PostCategory, ...] = field(default_factory=tuple)
    comments: Tuple[Comment, ...] = field(default_factory=tuple)

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(pc.category for pc in self.post_categories)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["author"] = self.author.to_dict()
        data["postCategories"] = [pc.to_dict() for pc in self.post_categories]
        data["comments"] = [comment.to_dict() for comment in self.comments]
        return data
