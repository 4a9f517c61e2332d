"""Row-level helpers over the Supabase PostgREST client."""

import logging
from typing import Any
from uuid import UUID

from supabase import Client

from taskboard.database.connection import get_supabase_admin_client

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def _first(data: list[Row] | None) -> Row | None:
    return data[0] if data else None


class SupabaseQueryBuilder:
    """
    Single-table reads and writes addressed by ``id`` or one column.

    Store errors propagate to the caller unchanged.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    def get_by_id(self, table: str, record_id: UUID | str) -> Row | None:
        return self.get_by_field(table, "id", str(record_id))

    def get_by_field(self, table: str, field: str, value: Any) -> Row | None:
        response = self.client.table(table).select("*").eq(field, value).execute()
        return _first(response.data)

    def list_records(
        self, table: str, order_by: str | None = None, order_desc: bool = True
    ) -> list[Row]:
        query = self.client.table(table).select("*")
        if order_by:
            query = query.order(order_by, desc=order_desc)
        return query.execute().data

    def insert_record(self, table: str, data: Row) -> Row | None:
        """Insert one row and return it as stored (with defaults filled in)."""
        return _first(self.client.table(table).insert(data).execute().data)

    def upsert_record(
        self,
        table: str,
        record: Row,
        conflict_columns: list[str],
        ignore_duplicates: bool = False,
    ) -> Row | None:
        """
        INSERT ... ON CONFLICT on ``conflict_columns``.

        With ``ignore_duplicates`` the conflict is DO NOTHING: an existing row
        is left untouched and None is returned for it.
        """
        try:
            response = (
                self.client.table(table)
                .upsert(
                    record,
                    on_conflict=",".join(conflict_columns),
                    ignore_duplicates=ignore_duplicates,
                )
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to upsert record in {table}: {e}")
            raise
        return _first(response.data)

    def update_record(self, table: str, record_id: UUID | str, data: Row) -> Row | None:
        """Write ``data`` to one row; None when no row has that id."""
        response = self.client.table(table).update(data).eq("id", str(record_id)).execute()
        return _first(response.data)

    def delete_record(self, table: str, record_id: UUID | str) -> bool:
        response = self.client.table(table).delete().eq("id", str(record_id)).execute()
        return bool(response.data)


def get_query_builder(client: Client | None = None) -> SupabaseQueryBuilder:
    """Builder bound to ``client``, or to the service-role client when omitted."""
    return SupabaseQueryBuilder(client or get_supabase_admin_client())
