import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.parse import urlsplit

from django.core.exceptions import ImproperlyConfigured
from django.db import DEFAULT_DB_ALIAS, connections
from django.utils import timezone as django_timezone
from django.utils.module_loading import import_string

from blogposts.conf import settings
from blogposts.entities import Post, PostWithRelations
from blogposts.models import Post as PostModel

logger = logging.getLogger(f"{settings.BLOGPOSTS_LOGGER}.repository")

ORM_BACKEND = "blogposts.backends.orm.ORMPostBackend"
SQL_BACKEND = "blogposts.backends.sql.SQLPostBackend"

LOOPBACK_HOST_NAMES = ("localhost",)

_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """
    Turn a title into a URL-safe slug: lower-case, runs of anything that is not
    a letter or digit become one hyphen, outer hyphens are dropped.

    The slug is not guaranteed to be unique.
    """
    return _SLUG_SEPARATOR_RE.sub("-", title.lower()).strip("-")


def _is_loopback_host(host: Optional[str]) -> bool:
    if not host:
        return False
    if host in LOOPBACK_HOST_NAMES:
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def is_loopback_database(database_url: Optional[str]) -> bool:
    """
    Whether a database URL (or bare host name) points at the local machine.
    """
    if not database_url:
        return False
    if "//" not in database_url:
        if _is_loopback_host(database_url):
            return True
        # Bare "host:port"
        database_url = f"//{database_url}"
    try:
        host = urlsplit(database_url).hostname
    except ValueError:
        return False
    return _is_loopback_host(host)


@dataclass(frozen=True)
class RepositoryConfig:
    read_backend: str = ORM_BACKEND
    query_endpoint: str = "http://localhost:3000/"

    @classmethod
    def from_settings(cls) -> "RepositoryConfig":
        """
        Snapshot the ``BLOGPOSTS_*`` settings. Without an explicit
        ``BLOGPOSTS_READ_BACKEND`` the SQL backend is picked for loopback
        databases and the ORM backend otherwise.
        """
        read_backend = settings.BLOGPOSTS_READ_BACKEND
        if read_backend is None:
            database_url = settings.BLOGPOSTS_DATABASE_URL or connections[
                DEFAULT_DB_ALIAS
            ].settings_dict.get("HOST")
            read_backend = SQL_BACKEND if is_loopback_database(database_url) else ORM_BACKEND
        return cls(
            read_backend=read_backend,
            query_endpoint=settings.BLOGPOSTS_QUERY_ENDPOINT,
        )


def get_read_backend(config: RepositoryConfig):
    try:
        backend_class = import_string(config.read_backend)
    except ImportError:
        raise ImproperlyConfigured(
            "BLOGPOSTS_READ_BACKEND refers to backend '%s' that can not be imported"
            % config.read_backend
        )
    return backend_class(config)


class PostRepository:
    """
    Create, read, update and delete posts.

    Writes always go through the Django ORM. Reads go through the configured
    read backend; every backend returns the same :py:class:`PostWithRelations`
    shape for the same data.
    """

    def __init__(self, config: Optional[RepositoryConfig] = None, backend=None):
        self.config = config if config is not None else RepositoryConfig.from_settings()
        self.backend = backend if backend is not None else get_read_backend(self.config)

    def create(self, **fields) -> Post:
        """
        Insert a post.

        :param fields: Post field values; ``author`` or ``author_id`` is required.
        :return: The stored post including its identifier and timestamps.
        :raises django.db.IntegrityError: A constraint such as the unique slug was violated.
        """
        categories = fields.pop("categories", None)
        post = PostModel.objects.create(**fields)
        if categories:
            post.categories.set(categories)
        return Post.from_model(post)

    def get_all(self) -> List[PostWithRelations]:
        try:
            return self.backend.get_all()
        except Exception:
            logger.exception("Failed to fetch all posts")
            raise

    def get_by_id(self, post_id: int) -> Optional[PostWithRelations]:
        try:
            return self.backend.get_by_id(post_id)
        except Exception:
            logger.exception("Failed to fetch post %r with relations", post_id)
            raise

    def get_by_slug(self, slug: str) -> Optional[PostWithRelations]:
        try:
            return self.backend.get_by_slug(slug)
        except Exception:
            logger.exception("Failed to fetch post %r with relations", slug)
            raise

    def update(self, post_id: int, **fields: Any) -> Optional[Post]:
        """
        Update some fields of a post. ``updated_at`` is always set to now.

        :return: The updated post, or ``None`` if no post has the given id.
        """
        categories = fields.pop("categories", None)
        fields["updated_at"] = django_timezone.now()
        updated = PostModel.objects.filter(pk=post_id).update(**fields)
        if not updated:
            return None
        post = PostModel.objects.get(pk=post_id)
        if categories is not None:
            post.categories.set(categories)
        return Post.from_model(post)

    def delete(self, post_id: int) -> bool:
        """Delete a post. Returns whether a post was removed."""
        deleted, _ = PostModel.objects.filter(pk=post_id).delete()
        return deleted > 0

    generate_slug = staticmethod(generate_slug)


_default_repository: Optional[PostRepository] = None


def get_post_repository() -> PostRepository:
    """Return the repository configured from settings, building it on first use."""
    global _default_repository
    if _default_repository is None:
        _default_repository = PostRepository()
    return _default_repository


def reset_post_repository() -> None:
    """Forget the default repository so the next call reads settings again."""
    global _default_repository
    _default_repository = None


def create_post(**fields) -> Post:
    return get_post_repository().create(**fields)


def get_all_posts() -> List[PostWithRelations]:
    return get_post_repository().get_all()


def get_post_by_id(post_id: int) -> Optional[PostWithRelations]:
    return get_post_repository().get_by_id(post_id)


def get_post_by_slug(slug: str) -> Optional[PostWithRelations]:
    return get_post_repository().get_by_slug(slug)


def update_post(post_id: int, **fields: Any) -> Optional[Post]:
    return get_post_repository().update(post_id, **fields)


def delete_post(post_id: int) -> bool:
    return get_post_repository().delete(post_id)
