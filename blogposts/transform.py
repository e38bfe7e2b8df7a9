"""
Conversion of flat SQL rows into :py:mod:`blogposts.entities` aggregates.

Rows are plain mappings with snake_case keys as returned by the query
endpoint. Joined author columns are prefixed: ``author_user_id``,
``author_name``, ... on post rows and ``comment_author_id``,
``comment_author_name``, ... on comment rows.
"""

from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Union

from blogposts.dates import parse_optional_timestamp, parse_timestamp_or_now
from blogposts.entities import (
    Category,
    Comment,
    PostCategory,
    PostWithRelations,
    User,
    placeholder_author,
)

Row = Mapping[str, Any]

POST_AUTHOR_ID_KEY = "author_user_id"
POST_AUTHOR_PREFIX = "author_"
COMMENT_AUTHOR_ID_KEY = "comment_author_id"
COMMENT_AUTHOR_PREFIX = "comment_author_"


def group_by_parent(
    rows: Iterable[Row], key: Union[str, Callable[[Row], Hashable]]
) -> Dict[Hashable, List[Row]]:
    """
    Group rows by their parent identifier, keeping input order inside each group.

    :param rows: The flat rows.
    :param key: A column name or a callable returning the parent identifier.
    :return: A dict mapping each parent identifier to its rows.
    """
    key_func = key if callable(key) else (lambda row: row[key])
    grouped: Dict[Hashable, List[Row]] = {}
    for row in rows:
        grouped.setdefault(key_func(row), []).append(row)
    return grouped


def author_from_row(row: Row, id_key: str, prefix: str) -> Optional[User]:
    """
    Build the joined author of a row, or ``None`` when the join found no user.
    """
    author_id = row.get(id_key)
    if author_id is None:
        return None
    return User(
        id=author_id,
        name=row.get(f"{prefix}name") or "",
        email=row.get(f"{prefix}email") or "",
        avatar=row.get(f"{prefix}avatar"),
        bio=row.get(f"{prefix}bio"),
        created_at=parse_timestamp_or_now(
            row.get(f"{prefix}created_at"), field="author created_at"
        ),
    )


def category_from_row(row: Row) -> Category:
    return Category(
        id=row["id"],
        name=row["name"],
        slug=row["slug"],
        created_at=parse_timestamp_or_now(
            row.get("created_at"), field="category created_at"
        ),
    )


def comment_from_row(row: Row) -> Comment:
    author = author_from_row(row, COMMENT_AUTHOR_ID_KEY, COMMENT_AUTHOR_PREFIX)
    return Comment(
        id=row["id"],
        content=row["content"],
        post_id=row["post_id"],
        author_id=row["author_id"],
        created_at=parse_timestamp_or_now(
            row.get("created_at"), field="comment created_at"
        ),
        author=author or placeholder_author(row["author_id"]),
    )


def post_categories_from_rows(post_id: int, rows: Iterable[Row]) -> List[PostCategory]:
    """Category rows of one post; repeated categories are collapsed."""
    seen = set()
    post_categories = []
    for row in rows:
        if row.get("id") is None or row["id"] in seen:
            continue
        seen.add(row["id"])
        category = category_from_row(row)
        post_categories.append(
            PostCategory(post_id=post_id, category_id=category.id, category=category)
        )
    return post_categories


def transform_post_row(
    row: Row,
    category_rows: Iterable[Row] = (),
    comment_rows: Iterable[Row] = (),
) -> PostWithRelations:
    """
    Assemble one post aggregate from its flat post row and the flat rows of its
    categories and comments.
    """
    author = author_from_row(row, POST_AUTHOR_ID_KEY, POST_AUTHOR_PREFIX)
    return PostWithRelations(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        excerpt=row.get("excerpt"),
        content=row["content"],
        cover_image=row.get("cover_image"),
        author_id=row["author_id"],
        published_at=parse_optional_timestamp(
            row.get("published_at"), field="post published_at"
        ),
        created_at=parse_timestamp_or_now(row.get("created_at"), field="post created_at"),
        updated_at=parse_timestamp_or_now(row.get("updated_at"), field="post updated_at"),
        author=author or placeholder_author(row["author_id"]),
        post_categories=tuple(post_categories_from_rows(row["id"], category_rows)),
        comments=tuple(comment_from_row(comment) for comment in comment_rows),
    )
