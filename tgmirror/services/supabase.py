# tgmirror/services/supabase.py
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from supabase import create_client, Client

from tgmirror.store.base import StorageError

# ================================
# TABLE LAYOUT
# ================================
# create table mirror_kv (
#     namespace text not null,
#     key       text not null,
#     value     jsonb,
#     primary key (namespace, key)
# );


def make_client(url: Optional[str], key: Optional[str]) -> Client:
    if not url or not key:
        raise StorageError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for the supabase backend")
    return create_client(url, key)


# ================================
# KEY-VALUE STORAGE ON ONE TABLE
# ================================
class SupabaseStorage:
    """
    Storage backend that keeps one namespace of a shared key-value table.

    The index and the queue each get their own namespace, so the two stores
    never see each other's keys. Any client or HTTP error is re-raised as
    StorageError; nothing is retried here.
    """

    def __init__(self, client: Client, table: str, namespace: str) -> None:
        self._client = client
        self._table = table
        self.namespace = namespace

    def _query(self):
        return self._client.table(self._table)

    def get(self, key: str) -> Optional[Any]:
        try:
            response = (
                self._query()
                .select("value")
                .eq("namespace", self.namespace)
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logging.error("[STORAGE] get %s/%s failed: %s", self.namespace, key, e)
            raise StorageError(str(e)) from e

        rows = response.data or []
        if not rows:
            return None
        return rows[0].get("value")

    def put(self, key: str, value: Any) -> None:
        row = {"namespace": self.namespace, "key": key, "value": value}
        try:
            self._query().upsert(row, on_conflict="namespace,key").execute()
        except Exception as e:
            logging.error("[STORAGE] put %s/%s failed: %s", self.namespace, key, e)
            raise StorageError(str(e)) from e

    def contains(self, key: str) -> bool:
        try:
            response = (
                self._query()
                .select("key")
                .eq("namespace", self.namespace)
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logging.error("[STORAGE] lookup %s/%s failed: %s", self.namespace, key, e)
            raise StorageError(str(e)) from e

        return bool(response.data)

    def items(self) -> List[Tuple[str, Any]]:
        try:
            response = (
                self._query()
                .select("key,value")
                .eq("namespace", self.namespace)
                .order("key")
                .execute()
            )
        except Exception as e:
            logging.error("[STORAGE] scan %s failed: %s", self.namespace, e)
            raise StorageError(str(e)) from e

        return [(row["key"], row.get("value")) for row in (response.data or [])]
