import datetime
import json
from datetime import timezone

from blogposts.models import Author, Category, Comment, Post


class ClientResponse:
    """Makes a Django test client response look like a ``requests`` response."""

    def __init__(self, response):
        self.response = response

    @property
    def ok(self):
        return self.response.status_code < 400

    @property
    def text(self):
        return self.response.content.decode()

    def json(self):
        return json.loads(self.response.content)


class ClientSession:
    """Routes :py:class:`QueryExecutor` requests through the Django test client."""

    def __init__(self, client):
        self.client = client
        self.requests = []

    def post(self, url, json=None):
        self.requests.append(json)
        return ClientResponse(
            self.client.post(url, data=_dumps(json), content_type="application/json")
        )


def _dumps(data):
    return json.dumps(data)


def utc(*args):
    return datetime.datetime(*args, tzinfo=timezone.utc)


def make_blog():
    """
    Create two authors, three categories, three posts (one of them a draft)
    and a few comments. Returns the created model instances by name.
    """
    alice = Author.objects.create(
        name="Alice",
        email="alice@example.com",
        avatar="/avatars/alice.png",
        bio="Writes about Python.",
        created_at=utc(2023, 1, 1, 9, 0, 0, 123456),
    )
    bob = Author.objects.create(
        name="Bob", email="bob@example.com", created_at=utc(2023, 2, 1)
    )
    python = Category.objects.create(name="Python", slug="python", created_at=utc(2023, 1, 2))
    django = Category.objects.create(name="Django", slug="django", created_at=utc(2023, 1, 3))
    misc = Category.objects.create(name="Misc", slug="misc", created_at=utc(2023, 1, 4))

    older = Post.objects.create(
        title="Older post",
        slug="older-post",
        excerpt="An older post",
        content="Old content about Django.",
        author=alice,
        published_at=utc(2024, 1, 10, 8, 30),
        created_at=utc(2024, 1, 9),
        updated_at=utc(2024, 1, 10),
    )
    newer = Post.objects.create(
        title="Newer post",
        slug="newer-post",
        content="New content.",
        cover_image="/covers/newer.jpg",
        author=bob,
        published_at=utc(2024, 3, 1, 12, 0, 0, 500000),
        created_at=utc(2024, 2, 28),
        updated_at=utc(2024, 3, 1),
    )
    draft = Post.objects.create(
        title="Draft",
        slug="draft",
        content="Not ready yet.",
        author=alice,
        created_at=utc(2024, 4, 1),
        updated_at=utc(2024, 4, 1),
    )
    older.categories.set([django, python])
    newer.categories.set([misc])

    first = Comment.objects.create(
        content="First!", post=older, author=bob, created_at=utc(2024, 1, 11)
    )
    second = Comment.objects.create(
        content="Thanks", post=older, author=alice, created_at=utc(2024, 1, 12)
    )
    third = Comment.objects.create(
        content="Nice", post=newer, author=alice, created_at=utc(2024, 3, 2)
    )
    return {
        "alice": alice,
        "bob": bob,
        "python": python,
        "django": django,
        "misc": misc,
        "older": older,
        "newer": newer,
        "draft": draft,
        "first": first,
        "second": second,
        "third": third,
    }
