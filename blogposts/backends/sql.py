from typing import List, Optional

from django.core.exceptions import ImproperlyConfigured

from blogposts.backends.base import PostBackend
from blogposts.entities import PostWithRelations
from blogposts.executor import QueryExecutor
from blogposts.transform import group_by_parent, transform_post_row

POST_COLUMNS = """
    p.id, p.title, p.slug, p.excerpt, p.content, p.cover_image,
    p.author_id, p.published_at, p.created_at, p.updated_at,
    a.id AS author_user_id, a.name AS author_name, a.email AS author_email,
    a.avatar AS author_avatar, a.bio AS author_bio, a.created_at AS author_created_at
"""

ALL_POSTS_QUERY = f"""
    SELECT {POST_COLUMNS}
    FROM posts p
    LEFT JOIN users a ON p.author_id = a.id
    ORDER BY p.published_at DESC NULLS LAST, p.id
"""

POST_BY_ID_QUERY = f"""
    SELECT {POST_COLUMNS}
    FROM posts p
    LEFT JOIN users a ON p.author_id = a.id
    WHERE p.id = %s
"""

POST_BY_SLUG_QUERY = f"""
    SELECT {POST_COLUMNS}
    FROM posts p
    LEFT JOIN users a ON p.author_id = a.id
    WHERE p.slug = %s
"""

CATEGORIES_QUERY = """
    SELECT pc.post_id, c.id, c.name, c.slug, c.created_at
    FROM post_categories pc
    JOIN categories c ON pc.category_id = c.id
    {where}
    ORDER BY c.id
"""

COMMENTS_QUERY = """
    SELECT
        cm.id, cm.content, cm.post_id, cm.author_id, cm.created_at,
        a.id AS comment_author_id, a.name AS comment_author_name,
        a.email AS comment_author_email, a.avatar AS comment_author_avatar,
        a.bio AS comment_author_bio, a.created_at AS comment_author_created_at
    FROM comments cm
    LEFT JOIN users a ON cm.author_id = a.id
    {where}
    ORDER BY cm.created_at DESC, cm.id
"""


class SQLPostBackend(PostBackend):
    """
    Reads post aggregates with three flat SQL statements sent through a
    :py:class:`QueryExecutor` (posts with authors, categories, comments with
    authors) and joins them in memory.
    """

    def __init__(self, config=None, executor: Optional[QueryExecutor] = None):
        super().__init__(config)
        if executor is None:
            if config is None:
                raise ImproperlyConfigured(
                    "SQLPostBackend needs a config with a query endpoint or an executor"
                )
            executor = QueryExecutor(config.query_endpoint)
        self.executor = executor

    def get_all(self) -> List[PostWithRelations]:
        post_rows = self.executor.execute(ALL_POSTS_QUERY)
        category_rows = self.executor.execute(CATEGORIES_QUERY.format(where=""))
        comment_rows = self.executor.execute(COMMENTS_QUERY.format(where=""))

        categories_by_post = group_by_parent(category_rows, "post_id")
        comments_by_post = group_by_parent(comment_rows, "post_id")

        return [
            transform_post_row(
                row,
                categories_by_post.get(row["id"], []),
                comments_by_post.get(row["id"], []),
            )
            for row in post_rows
        ]

    def get_by_id(self, post_id: int) -> Optional[PostWithRelations]:
        return self._get_one(POST_BY_ID_QUERY, post_id)

    def get_by_slug(self, slug: str) -> Optional[PostWithRelations]:
        return self._get_one(POST_BY_SLUG_QUERY, slug)

    def _get_one(self, query: str, value) -> Optional[PostWithRelations]:
        post_rows = self.executor.execute(query, [value])
        if not post_rows:
            return None
        row = post_rows[0]

        category_rows = self.executor.execute(
            CATEGORIES_QUERY.format(where="WHERE pc.post_id = %s"), [row["id"]]
        )
        comment_rows = self.executor.execute(
            COMMENTS_QUERY.format(where="WHERE cm.post_id = %s"), [row["id"]]
        )
        return transform_post_row(row, category_rows, comment_rows)
