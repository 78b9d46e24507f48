from typing import Any, Dict, List, Optional

from infrastructure.repositories.supabase_table import SupabaseTable
from use_cases.domain_models import POST_LIST_COLUMNS, Post


class SupabasePostRepository(SupabaseTable):
    table_name = "posts"

    def list_posts(self) -> List[Post]:
        return [Post.from_row(row) for row in self.select_all(POST_LIST_COLUMNS)]

    def get_post(self, post_id: str) -> Post:
        return Post.from_row(self.select_one(post_id))

    def insert_post(self, payload: Dict[str, Any]) -> Post:
        return Post.from_row(self.insert(payload))

    def update_post(self, post_id: str, payload: Dict[str, Any]) -> Post:
        return Post.from_row(self.update(post_id, payload))

    def delete_post(self, post_id: str) -> None:
        self.delete(post_id)

    def count_posts(self, published: Optional[bool] = None) -> int:
        if published is None:
            return self.count()
        return self.count({"is_published": published})
