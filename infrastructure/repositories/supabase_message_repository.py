from typing import List

from infrastructure.repositories.supabase_table import SupabaseTable
from use_cases.domain_models import Message


class SupabaseMessageRepository(SupabaseTable):
    table_name = "messages"

    def list_messages(self) -> List[Message]:
        return [Message.from_row(row) for row in self.select_all()]

    def delete_message(self, message_id: int) -> None:
        self.delete(message_id)

    def count_messages(self, unread_only: bool = False) -> int:
        if unread_only:
            return self.count({"read": False})
        return self.count()
