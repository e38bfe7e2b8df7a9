from django.conf import settings

# Dotted path of the read backend, None infers it from the database host
settings.BLOGPOSTS_READ_BACKEND = getattr(settings, "BLOGPOSTS_READ_BACKEND", None)

# Connection URL used to detect a loopback (development) database
settings.BLOGPOSTS_DATABASE_URL = getattr(settings, "BLOGPOSTS_DATABASE_URL", None)

# Query-execution endpoint

settings.BLOGPOSTS_QUERY_ENDPOINT = getattr(
    settings, "BLOGPOSTS_QUERY_ENDPOINT", "http://localhost:3000/"
)
# The proxy view executes arbitrary SQL, keep it off outside development
settings.BLOGPOSTS_QUERY_ENDPOINT_ENABLED = getattr(
    settings, "BLOGPOSTS_QUERY_ENDPOINT_ENABLED", False
)

settings.BLOGPOSTS_LOGGER = getattr(settings, "BLOGPOSTS_LOGGER", "blogposts")

# Feeds
settings.BLOGPOSTS_SITE_URL = getattr(settings, "BLOGPOSTS_SITE_URL", "")
settings.BLOGPOSTS_SITE_NAME = getattr(settings, "BLOGPOSTS_SITE_NAME", "TedBlog")
settings.BLOGPOSTS_SITE_DESCRIPTION = getattr(
    settings,
    "BLOGPOSTS_SITE_DESCRIPTION",
    "Personal blog about web development, technology, and building things.",
)

settings.BLOGPOSTS_POSTS_PER_PAGE = getattr(settings, "BLOGPOSTS_POSTS_PER_PAGE", 6)
