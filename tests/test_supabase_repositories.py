from unittest.mock import MagicMock

import pytest

from infrastructure.repositories.supabase_message_repository import SupabaseMessageRepository
from infrastructure.repositories.supabase_post_repository import SupabasePostRepository
from infrastructure.repositories.supabase_table import StoreError
from use_cases.domain_models import POST_LIST_COLUMNS


class APIError(Exception):
    """Shaped like postgrest's APIError: the text lives in ``.message``."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


def _client(data=None, count=None, error=None):
    """A client whose every query chain ends in one execute() result."""
    client = MagicMock()
    builder = MagicMock()
    for name in ("select", "order", "eq", "limit", "insert", "update", "delete"):
        getattr(builder, name).return_value = builder
    if error is not None:
        builder.execute.side_effect = error
    else:
        builder.execute.return_value = MagicMock(data=data, count=count)
    client.table.return_value = builder
    return client, builder


POST_ROW = {
    "id": "p-1",
    "title": "Hello",
    "slug": "hello",
    "is_published": True,
    "published_at": "2024-05-01T12:00:00+00:00",
    "created_at": "2024-04-30T12:00:00+00:00",
    "tags": ["a"],
}


def test_list_posts_selects_listing_columns_newest_first():
    client, builder = _client(data=[POST_ROW])

    posts = SupabasePostRepository(client).list_posts()

    client.table.assert_called_with("posts")
    builder.select.assert_called_once_with(POST_LIST_COLUMNS)
    builder.order.assert_called_once_with("created_at", desc=True)
    assert posts[0].id == "p-1"
    assert posts[0].status_label == "Published"


def test_get_post_missing_row_raises():
    client, _ = _client(data=[])

    with pytest.raises(StoreError):
        SupabasePostRepository(client).get_post("nope")


def test_get_post_returns_full_row():
    client, builder = _client(data=[POST_ROW])

    post = SupabasePostRepository(client).get_post("p-1")

    builder.eq.assert_called_once_with("id", "p-1")
    assert post.tags == ["a"]


def test_insert_post_returns_inserted_row():
    client, builder = _client(data=[POST_ROW])

    post = SupabasePostRepository(client).insert_post({"title": "Hello"})

    builder.insert.assert_called_once_with({"title": "Hello"})
    assert post.slug == "hello"


def test_update_post_filters_by_id():
    client, builder = _client(data=[POST_ROW])

    SupabasePostRepository(client).update_post("p-1", {"title": "Hello"})

    builder.update.assert_called_once_with({"title": "Hello"})
    builder.eq.assert_called_once_with("id", "p-1")


def test_store_errors_carry_backend_message():
    client, _ = _client(error=APIError("duplicate key value violates unique constraint \"posts_slug_key\""))

    with pytest.raises(StoreError, match="duplicate key"):
        SupabasePostRepository(client).insert_post({"title": "Hello"})


def test_delete_of_missing_row_raises():
    client, _ = _client(data=[])

    with pytest.raises(StoreError):
        SupabasePostRepository(client).delete_post("gone")


def test_count_posts_by_published_flag():
    client, builder = _client(count=4)

    assert SupabasePostRepository(client).count_posts(published=True) == 4
    builder.select.assert_called_once_with("*", count="exact", head=True)
    builder.eq.assert_called_once_with("is_published", True)


def test_count_without_result_is_zero():
    client, _ = _client(count=None)
    assert SupabasePostRepository(client).count_posts() == 0


def test_list_messages_maps_rows():
    row = {"id": 3, "created_at": "2024-05-01T10:00:00Z", "name": "Ana", "email": "ana@example.com",
           "subject": "", "message": "Hi", "read": False}
    client, _ = _client(data=[row])

    messages = SupabaseMessageRepository(client).list_messages()

    client.table.assert_called_with("messages")
    assert messages[0].subject is None
    assert messages[0].subject_label == "(No Subject)"


def test_count_unread_messages():
    client, builder = _client(count=2)

    assert SupabaseMessageRepository(client).count_messages(unread_only=True) == 2
    builder.eq.assert_called_once_with("read", False)


def test_delete_message_filters_by_id():
    client, builder = _client(data=[{"id": 3}])

    SupabaseMessageRepository(client).delete_message(3)

    builder.delete.assert_called_once_with()
    builder.eq.assert_called_once_with("id", 3)
