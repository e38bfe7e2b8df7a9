from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Author(models.Model):
    """
    A person that writes posts or comments. Stored in the ``users`` table.
    """

    name = models.CharField(max_length=255, verbose_name=_("name"))
    email = models.CharField(max_length=254, verbose_name=_("email"))
    avatar = models.TextField(blank=True, null=True, verbose_name=_("avatar"))
    bio = models.TextField(blank=True, null=True, verbose_name=_("biography"))
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_("created at"))

    class Meta:
        db_table = "users"
        verbose_name = _("author")
        verbose_name_plural = _("authors")

    def __str__(self):
        return self.name


class Category(models.Model):
    name = models.CharField(max_length=255, verbose_name=_("name"))
    slug = models.SlugField(max_length=255, unique=True, verbose_name=_("slug"))
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_("created at"))

    class Meta:
        db_table = "categories"
        verbose_name = _("category")
        verbose_name_plural = _("categories")

    def __str__(self):
        return self.name


class Post(models.Model):
    """
    A blog post. A post without ``published_at`` is a draft.
    """

    title = models.CharField(max_length=255, verbose_name=_("title"))
    slug = models.SlugField(max_length=255, unique=True, verbose_name=_("slug"))
    excerpt = models.TextField(blank=True, null=True, verbose_name=_("excerpt"))
    content = models.TextField(verbose_name=_("content"))
    cover_image = models.TextField(blank=True, null=True, verbose_name=_("cover image"))
    author = models.ForeignKey(
        to=Author,
        on_delete=models.CASCADE,
        related_name="posts",
        verbose_name=_("author"),
    )
    categories = models.ManyToManyField(
        to=Category,
        related_name="posts",
        blank=True,
        db_table="post_categories",
        verbose_name=_("categories"),
    )
    published_at = models.DateTimeField(blank=True, null=True, verbose_name=_("published at"))
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_("created at"))
    updated_at = models.DateTimeField(default=timezone.now, verbose_name=_("updated at"))

    class Meta:
        db_table = "posts"
        verbose_name = _("post")
        verbose_name_plural = _("posts")

    def __str__(self):
        return self.title


class Comment(models.Model):
    content = models.TextField(verbose_name=_("content"))
    post = models.ForeignKey(
        to=Post,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name=_("post"),
    )
    author = models.ForeignKey(
        to=Author,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name=_("author"),
    )
    created_at = models.DateTimeField(default=timezone.now, verbose_name=_("created at"))

    class Meta:
        db_table = "comments"
        ordering = ["-created_at"]
        verbose_name = _("comment")
        verbose_name_plural = _("comments")

    def __str__(self):
        return self.content[:50]
