import logging
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)


class StoreError(Exception):
    """A Supabase read/write was rejected or could not be delivered."""


class SupabaseTable:
    """Thin wrapper over one PostgREST table. Every failure surfaces as StoreError."""

    table_name = ""

    def __init__(self, client: Any):
        self.client = client

    def _query(self):
        return self.client.table(self.table_name)

    def _execute(self, action: str, builder) -> Any:
        try:
            return builder.execute()
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            log.error(f"{self.table_name}.{action} failed: {message}")
            raise StoreError(message) from e

    def select_all(self, columns: str = "*", order_by: str = "created_at", descending: bool = True) -> List[Dict[str, Any]]:
        builder = self._query().select(columns).order(order_by, desc=descending)
        response = self._execute("select_all", builder)
        return list(response.data or [])

    def select_one(self, row_id: Any, columns: str = "*") -> Dict[str, Any]:
        builder = self._query().select(columns).eq("id", row_id).limit(1)
        rows = self._execute("select_one", builder).data or []
        if not rows:
            raise StoreError(f"No {self.table_name} row with id {row_id}")
        return rows[0]

    def insert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute("insert", self._query().insert(payload)).data or []
        if not rows:
            raise StoreError(f"Insert into {self.table_name} returned no row")
        return rows[0]

    def update(self, row_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute("update", self._query().update(payload).eq("id", row_id)).data or []
        if not rows:
            raise StoreError(f"No {self.table_name} row with id {row_id}")
        return rows[0]

    def delete(self, row_id: Any) -> None:
        rows = self._execute("delete", self._query().delete().eq("id", row_id)).data or []
        if not rows:
            # Already gone, or hidden by row-level security.
            raise StoreError(f"No {self.table_name} row with id {row_id}")

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        builder = self._query().select("*", count="exact", head=True)
        for column, value in (filters or {}).items():
            builder = builder.eq(column, value)
        response = self._execute("count", builder)
        return response.count or 0
