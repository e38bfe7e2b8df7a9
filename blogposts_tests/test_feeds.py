import os
import tempfile
from io import StringIO
from xml.etree import ElementTree

import freezegun
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings

from blogposts.entities import Post
from blogposts.feeds import (
    SITEMAP_NAMESPACE,
    build_robots,
    build_rss,
    build_sitemap,
    join_url,
    normalize_site_url,
)
from blogposts.management.commands.generatefeeds import Command
from blogposts.repository import reset_post_repository

from .utils import make_blog, utc

SITE = "https://blog.example.com"


def make_post(**overrides):
    fields = dict(
        id=1,
        title="Tom & Jerry <3",
        slug="tom-and-jerry",
        excerpt="  A classic.  ",
        content="...",
        cover_image=None,
        author_id=1,
        published_at=utc(2024, 1, 10, 8, 30),
        created_at=utc(2024, 1, 9),
        updated_at=utc(2024, 1, 11),
    )
    fields.update(overrides)
    return Post(**fields)


class UrlHelpersTest(SimpleTestCase):
    def test_normalize_site_url(self):
        self.assertEqual(normalize_site_url("https://blog.example.com/"), SITE)
        self.assertEqual(normalize_site_url(SITE), SITE)
        self.assertEqual(normalize_site_url(None), "")

    def test_join_url(self):
        self.assertEqual(join_url(SITE, "/blog"), f"{SITE}/blog")
        self.assertEqual(join_url(SITE, "about"), f"{SITE}/about")


class BuildRssTest(SimpleTestCase):
    def parse(self, xml):
        return ElementTree.fromstring(xml.encode("utf-8"))

    def test_channel(self):
        channel = self.parse(build_rss(SITE, "TedBlog", "About things", [])).find("channel")

        self.assertEqual(channel.findtext("title"), "TedBlog")
        self.assertEqual(channel.findtext("link"), SITE)
        self.assertEqual(channel.findtext("description"), "About things")
        self.assertEqual(channel.findtext("language"), "en")
        self.assertIsNotNone(channel.findtext("lastBuildDate"))

    def test_items(self):
        rss = build_rss(SITE, "TedBlog", "About things", [make_post()])
        item = self.parse(rss).find("channel/item")

        self.assertEqual(item.findtext("title"), "Tom & Jerry <3")
        self.assertEqual(item.findtext("link"), f"{SITE}/blog/tom-and-jerry")
        self.assertEqual(item.find("guid").get("isPermaLink"), "true")
        self.assertEqual(item.findtext("guid"), f"{SITE}/blog/tom-and-jerry")
        self.assertEqual(item.findtext("description"), "A classic.")
        self.assertEqual(item.findtext("pubDate"), "Wed, 10 Jan 2024 08:30:00 +0000")
        self.assertIn("Tom &amp; Jerry &lt;3", rss)

    def test_unpublished_item_uses_updated_at(self):
        rss = build_rss(SITE, "TedBlog", "", [make_post(published_at=None)])
        self.assertEqual(
            self.parse(rss).findtext("channel/item/pubDate"),
            "Thu, 11 Jan 2024 00:00:00 +0000",
        )


class BuildSitemapTest(SimpleTestCase):
    @freezegun.freeze_time("2024-06-01 00:00:00")
    def test_urls(self):
        root = ElementTree.fromstring(build_sitemap(SITE, [make_post()]).encode("utf-8"))
        ns = {"sm": SITEMAP_NAMESPACE}

        locs = [el.text for el in root.findall("sm:url/sm:loc", ns)]
        lastmods = [el.text for el in root.findall("sm:url/sm:lastmod", ns)]

        self.assertEqual(
            locs,
            [f"{SITE}/", f"{SITE}/blog", f"{SITE}/about", f"{SITE}/blog/tom-and-jerry"],
        )
        self.assertEqual(lastmods[0], "2024-06-01T00:00:00+00:00")
        self.assertEqual(lastmods[3], "2024-01-11T00:00:00+00:00")


class BuildRobotsTest(SimpleTestCase):
    def test_with_site(self):
        self.assertEqual(
            build_robots(SITE),
            f"User-agent: *\nAllow: /\nSitemap: {SITE}/sitemap.xml\n",
        )

    def test_without_site(self):
        self.assertEqual(build_robots(), "User-agent: *\nAllow: /\n")


class GenerateFeedsCommandTest(TestCase):
    def setUp(self):
        reset_post_repository()
        self.addCleanup(reset_post_repository)
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.output_dir = os.path.join(tmp.name, "public")

    def call_command(self, *args, **kwargs):
        outbuf = StringIO()
        errbuf = StringIO()
        call_command(
            "generatefeeds",
            "--output-dir",
            self.output_dir,
            *args,
            stdout=outbuf,
            stderr=errbuf,
            **kwargs,
        )
        return outbuf.getvalue().strip(), errbuf.getvalue().strip()

    def read(self, name):
        with open(os.path.join(self.output_dir, name), encoding="utf-8") as fh:
            return fh.read()

    @override_settings(BLOGPOSTS_SITE_URL="https://blog.example.com/")
    def test_writes_feeds(self):
        make_blog()

        out, err = self.call_command()

        self.assertEqual(out, "Wrote feeds for 3 posts.")
        self.assertEqual(err, "")
        self.assertIn(f"Sitemap: {SITE}/sitemap.xml", self.read("robots.txt"))
        sitemap = self.read("sitemap.xml")
        self.assertIn(f"{SITE}/blog/newer-post", sitemap)
        self.assertIn(f"{SITE}/blog/draft", sitemap)
        rss = self.read("rss.xml")
        self.assertIn("<title>TedBlog</title>", rss)
        self.assertLess(rss.index("newer-post"), rss.index("older-post"))
        self.assertIn(f"{SITE}/blog/draft", rss)

    def test_help_mentions_drafts(self):
        self.assertIn("all posts, drafts included", Command.help)

    def test_site_url_argument(self):
        out, _ = self.call_command("--site-url", "https://other.example.com")

        self.assertEqual(out, "Wrote feeds for 0 posts.")
        self.assertIn("https://other.example.com/about", self.read("sitemap.xml"))

    @override_settings(BLOGPOSTS_SITE_URL="")
    def test_without_site_url(self):
        make_blog()

        out, _ = self.call_command()

        self.assertEqual(out, "No site URL configured, writing placeholder files.")
        self.assertEqual(self.read("robots.txt"), "User-agent: *\nAllow: /\n")
        self.assertIn("http://localhost/blog", self.read("sitemap.xml"))
        self.assertNotIn("<item>", self.read("rss.xml"))
