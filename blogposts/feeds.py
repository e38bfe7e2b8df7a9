"""
Builders for the static ``rss.xml``, ``sitemap.xml`` and ``robots.txt`` files.
"""

from io import StringIO
from typing import Iterable, List, Optional, Tuple

from django.utils import timezone as django_timezone
from django.utils.feedgenerator import Rss201rev2Feed
from django.utils.xmlutils import SimplerXMLGenerator

from blogposts.entities import Post

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
STATIC_PATHS = ("/", "/blog", "/about")


def normalize_site_url(site_url: Optional[str]) -> str:
    if not site_url:
        return ""
    return site_url[:-1] if site_url.endswith("/") else site_url


def join_url(site_url: str, path: str) -> str:
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{site_url}{path}"


def post_url(site_url: str, post: Post) -> str:
    return join_url(site_url, f"/blog/{post.slug}")


def build_rss(site_url: str, site_name: str, description: str, posts: Iterable[Post]) -> str:
    feed = Rss201rev2Feed(
        title=site_name,
        link=site_url,
        description=description,
        language="en",
    )
    for post in posts:
        link = post_url(site_url, post)
        feed.add_item(
            title=post.title,
            link=link,
            description=(post.excerpt or "").strip(),
            unique_id=link,
            unique_id_is_permalink=True,
            pubdate=post.published_at or post.updated_at,
        )
    return feed.writeString("utf-8")


def build_sitemap(site_url: str, posts: Iterable[Post]) -> str:
    now = django_timezone.now()
    urls: List[Tuple[str, object]] = [(join_url(site_url, path), now) for path in STATIC_PATHS]
    urls.extend((post_url(site_url, post), post.updated_at) for post in posts)

    stream = StringIO()
    handler = SimplerXMLGenerator(stream, "utf-8")
    handler.startDocument()
    handler.startElement("urlset", {"xmlns": SITEMAP_NAMESPACE})
    for loc, lastmod in urls:
        handler.startElement("url", {})
        handler.addQuickElement("loc", loc)
        handler.addQuickElement("lastmod", lastmod.isoformat())
        handler.endElement("url")
    handler.endElement("urlset")
    handler.endDocument()
    return stream.getvalue()


def build_robots(site_url: Optional[str] = None) -> str:
    lines = ["User-agent: *", "Allow: /"]
    if site_url:
        lines.append(f"Sitemap: {join_url(site_url, '/sitemap.xml')}")
    return "\n".join(lines) + "\n"
