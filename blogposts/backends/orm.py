from typing import List, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.db.models import F, Prefetch

from blogposts import entities
from blogposts.backends.base import PostBackend
from blogposts.models import Category, Comment, Post


def _get_related(instance, name):
    """Return a forward relation, or ``None`` when the related row is missing."""
    try:
        return getattr(instance, name)
    except ObjectDoesNotExist:
        return None


def user_from_model(author) -> entities.User:
    return entities.User(
        id=author.pk,
        name=author.name,
        email=author.email,
        avatar=author.avatar,
        bio=author.bio,
        created_at=author.created_at,
    )


def category_from_model(category) -> entities.Category:
    return entities.Category(
        id=category.pk,
        name=category.name,
        slug=category.slug,
        created_at=category.created_at,
    )


def comment_from_model(comment) -> entities.Comment:
    author = _get_related(comment, "author")
    return entities.Comment(
        id=comment.pk,
        content=comment.content,
        post_id=comment.post_id,
        author_id=comment.author_id,
        created_at=comment.created_at,
        author=(
            user_from_model(author)
            if author is not None
            else entities.placeholder_author(comment.author_id)
        ),
    )


def post_from_model(post) -> entities.PostWithRelations:
    """
    Build an aggregate from a :py:class:`Post` fetched with
    :py:meth:`ORMPostBackend.get_queryset`.
    """
    author = _get_related(post, "author")
    return entities.PostWithRelations(
        id=post.pk,
        title=post.title,
        slug=post.slug,
        excerpt=post.excerpt,
        content=post.content,
        cover_image=post.cover_image,
        author_id=post.author_id,
        published_at=post.published_at,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=(
            user_from_model(author)
            if author is not None
            else entities.placeholder_author(post.author_id)
        ),
        post_categories=tuple(
            entities.PostCategory(
                post_id=post.pk,
                category_id=category.pk,
                category=category_from_model(category),
            )
            for category in post.categories.all()
            if category is not None
        ),
        comments=tuple(comment_from_model(comment) for comment in post.comments.all()),
    )


class ORMPostBackend(PostBackend):
    """Reads post aggregates through the Django ORM's relation prefetching."""

    def get_queryset(self):
        return Post.objects.prefetch_related(
            "author",
            Prefetch("categories", queryset=Category.objects.order_by("pk")),
            Prefetch("comments", queryset=Comment.objects.order_by("-created_at", "pk")),
            "comments__author",
        )

    def get_all(self) -> List[entities.PostWithRelations]:
        queryset = self.get_queryset().order_by(
            F("published_at").desc(nulls_last=True), "pk"
        )
        return [post_from_model(post) for post in queryset]

    def get_by_id(self, post_id: int) -> Optional[entities.PostWithRelations]:
        post = self.get_queryset().filter(pk=post_id).first()
        return post_from_model(post) if post is not None else None

    def get_by_slug(self, slug: str) -> Optional[entities.PostWithRelations]:
        post = self.get_queryset().filter(slug=slug).first()
        return post_from_model(post) if post is not None else None
