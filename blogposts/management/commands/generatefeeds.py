import logging
import os

from django.core.management.base import BaseCommand

from blogposts.conf import settings
from blogposts.feeds import build_robots, build_rss, build_sitemap, normalize_site_url
from blogposts.repository import get_post_repository

logger = logging.getLogger(f"{settings.BLOGPOSTS_LOGGER}.feeds")

PLACEHOLDER_SITE_URL = "http://localhost"


class Command(BaseCommand):
    help = "Writes rss.xml, sitemap.xml and robots.txt for all posts, drafts included."

    def add_arguments(self, parser):
        parser.add_argument(
            "-o",
            "--output-dir",
            default="public",
            help="Directory the files are written to.",
            dest="output_dir",
        )
        parser.add_argument(
            "--site-url",
            default=None,
            help="Public site URL, defaults to BLOGPOSTS_SITE_URL.",
            dest="site_url",
        )

    def handle(self, *args, **options):
        output_dir = options["output_dir"]
        site_url = normalize_site_url(options["site_url"] or settings.BLOGPOSTS_SITE_URL)
        site_name = settings.BLOGPOSTS_SITE_NAME
        description = settings.BLOGPOSTS_SITE_DESCRIPTION

        os.makedirs(output_dir, exist_ok=True)

        if not site_url:
            self.stdout.write("No site URL configured, writing placeholder files.")
            self._write(output_dir, "robots.txt", build_robots())
            self._write(output_dir, "sitemap.xml", build_sitemap(PLACEHOLDER_SITE_URL, []))
            self._write(
                output_dir,
                "rss.xml",
                build_rss(PLACEHOLDER_SITE_URL, site_name, description, []),
            )
            return

        posts = get_post_repository().get_all()
        self._write(output_dir, "robots.txt", build_robots(site_url))
        self._write(output_dir, "sitemap.xml", build_sitemap(site_url, posts))
        self._write(
            output_dir, "rss.xml", build_rss(site_url, site_name, description, posts)
        )
        self.stdout.write("Wrote feeds for %d posts." % len(posts))

    def _write(self, output_dir, name, content):
        path = os.path.join(output_dir, name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(content)
        logger.debug("Wrote %s", path)
