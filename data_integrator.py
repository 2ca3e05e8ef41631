import logging
from typing import Dict, List, Any, Tuple, Optional

from supabase import create_client, Client

import config

logger = logging.getLogger(__name__)


def get_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    url = url or config.SUPABASE_URL
    key = key or config.SUPABASE_KEY
    if not url or not key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")
    return create_client(url, key)


class SupabaseOrderCollection:
    """
    The orders table seen as a plain document collection keyed by order id.

    Only list-all / insert / update-by-id / delete-by-id are offered; any
    filtering happens in memory on the caller's side.

    Every method returns (ok, message, data) and never raises.
    """

    def __init__(
            self,
            client: Client,
            schema: str = config.SCHEMA,
            table: str = config.ORDERS_TABLE,
    ) -> None:
        self.client = client
        self.schema = schema
        self.table = table

    def _table(self):
        return self.client.schema(self.schema).table(self.table)

    def list_all(self) -> Tuple[bool, str, List[Dict[str, Any]]]:
        """
        Fetch every row of the orders table.
        Returns (ok, message, rows)
        """
        try:
            resp = self._table().select("*").execute()

            if getattr(resp, "error", None):
                logger.error("Fetching %s failed: %s", self.table, resp.error)
                return False, f"Fetch failed: {resp.error}", []

            if not resp.data:
                return True, "No rows found", []

            return True, "Fetched", list(resp.data)

        except Exception as e:
            logger.error("Fetching %s failed: %s", self.table, e)
            return False, f"Unexpected error: {e}", []

    def insert(self, row: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
        """
        Insert a single order row; the id is supplied by the caller.
        Returns (ok, message, inserted_row)
        """
        try:
            resp = self._table().insert(row).execute()

            if getattr(resp, "error", None):
                logger.error("Insert of order %s failed: %s", row.get("id"), resp.error)
                return False, f"Insert failed: {resp.error}", None

            inserted = resp.data[0] if resp.data else row
            return True, "Inserted", inserted

        except Exception as e:
            logger.error("Insert of order %s failed: %s", row.get("id"), e)
            return False, str(e), None

    def update(self, order_id: str, row: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
        """
        Replace the given columns of one order (full or partial row).
        Returns (ok, message, updated_row)
        """
        payload = {k: v for k, v in row.items() if k != "id"}
        try:
            resp = self._table().update(payload).eq("id", order_id).execute()

            if getattr(resp, "error", None):
                logger.error("Update of order %s failed: %s", order_id, resp.error)
                return False, f"Update failed: {resp.error}", None

            updated = resp.data[0] if resp.data else None
            return True, "Updated", updated

        except Exception as e:
            logger.error("Update of order %s failed: %s", order_id, e)
            return False, str(e), None

    def delete(self, order_id: str) -> Tuple[bool, str, None]:
        """
        Delete one order by id. Deleting a missing id is not an error.
        Returns (ok, message, None)
        """
        try:
            resp = self._table().delete().eq("id", order_id).execute()

            if getattr(resp, "error", None):
                logger.error("Delete of order %s failed: %s", order_id, resp.error)
                return False, f"Delete failed: {resp.error}", None

            return True, "Deleted", None

        except Exception as e:
            logger.error("Delete of order %s failed: %s", order_id, e)
            return False, str(e), None
