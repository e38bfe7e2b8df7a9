from typing import List, Optional, Sequence

from django.core.paginator import Page, Paginator

from blogposts.conf import settings
from blogposts.entities import PostWithRelations


def matches_query(post: PostWithRelations, query: str) -> bool:
    """
    Whether a lower-cased search query occurs in the post's title, excerpt,
    content, author name or one of its category names.
    """
    haystacks = [post.title, post.excerpt or "", post.content, post.author.name]
    haystacks.extend(category.name for category in post.categories)
    return any(query in haystack.lower() for haystack in haystacks)


class PostFilter:
    """
    Category and free-text filtering of a post listing, with pagination.
    """

    def __init__(
        self,
        posts: Sequence[PostWithRelations],
        category: Optional[str] = None,
        query: str = "",
        per_page: Optional[int] = None,
    ):
        self.posts = list(posts)
        self.category = category or None
        self.query = (query or "").strip().lower()
        self.per_page = per_page or settings.BLOGPOSTS_POSTS_PER_PAGE

    @property
    def categories(self) -> List[str]:
        """Sorted names of every category used by the posts."""
        names = {
            category.name
            for post in self.posts
            for category in post.categories
            if category.name
        }
        return sorted(names)

    @property
    def has_active_filters(self) -> bool:
        return bool(self.category or self.query)

    @property
    def filtered_posts(self) -> List[PostWithRelations]:
        posts = self.posts
        if self.category:
            posts = [
                post
                for post in posts
                if any(c.name == self.category for c in post.categories)
            ]
        if self.query:
            posts = [post for post in posts if matches_query(post, self.query)]
        return posts

    def get_paginator(self) -> Paginator:
        return Paginator(self.filtered_posts, self.per_page, allow_empty_first_page=True)

    def get_page(self, number) -> Page:
        """Return a page of the filtered posts. Out-of-range numbers are clamped."""
        paginator = self.get_paginator()
        try:
            number = int(number)
        except (TypeError, ValueError):
            number = 1
        return paginator.page(max(1, min(number, paginator.num_pages)))
