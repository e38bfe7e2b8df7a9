from typing import List, Optional

from blogposts.entities import PostWithRelations


class PostBackend:
    """Base backend for reading post aggregates."""

    def __init__(self, config=None):
        self.config = config

    def get_all(self) -> List[PostWithRelations]:
        """Return every post, newest publication first, drafts last."""
        raise NotImplementedError("Backend must implement get_all")

    def get_by_id(self, post_id: int) -> Optional[PostWithRelations]:
        raise NotImplementedError("Backend must implement get_by_id")

    def get_by_slug(self, slug: str) -> Optional[PostWithRelations]:
        raise NotImplementedError("Backend must implement get_by_slug")
