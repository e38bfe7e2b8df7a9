from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class BlogpostsConfig(AppConfig):
    name = "blogposts"
    verbose_name = _("Blog posts")
    default_auto_field = "django.db.models.AutoField"

    def ready(self):
        from blogposts import conf  # noqa: F401
