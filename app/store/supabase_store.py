import logging
from datetime import datetime
from typing import List, Optional

from postgrest.exceptions import APIError

from app.core.media_resolver import MediaReference
from app.store.base import CategoryCard, ItemStore, ItemStoreError

logger = logging.getLogger(__name__)

ITEMS_TABLE = "portfolio_items"
CATEGORIES_TABLE = "portfolio_categories"


def _parse_timestamp(value) -> Optional[datetime]:
    if not value or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def row_to_reference(row: dict) -> MediaReference:
    return MediaReference(
        id=str(row["id"]),
        media_type=row["media_type"],
        category=row["category"],
        raw_url=row["embed_url"],
        full_resolution_url=row.get("full_url"),
        title=row.get("title"),
        created_at=_parse_timestamp(row.get("created_at")),
    )


class SupabaseItemStore(ItemStore):
    """Same tables as the SQL store, read through supabase-py."""

    def __init__(self, client):
        self.client = client

    def _execute(self, query):
        try:
            return query.execute().data or []
        except APIError as e:
            logger.exception("Supabase request failed")
            raise ItemStoreError(e.message or str(e)) from e

    def list_media_references(self, category=None, media_type=None, newest_first=True):
        query = self.client.table(ITEMS_TABLE).select("*")

        if category:
            query = query.eq("category", category)
        if media_type:
            query = query.eq("media_type", media_type)

        rows = self._execute(query.order("created_at", desc=newest_first))
        return [row_to_reference(r) for r in rows]

    def get(self, item_id: str) -> Optional[MediaReference]:
        rows = self._execute(
            self.client.table(ITEMS_TABLE).select("*").eq("id", item_id).limit(1)
        )
        return row_to_reference(rows[0]) if rows else None

    def create(self, data: dict) -> MediaReference:
        rows = self._execute(self.client.table(ITEMS_TABLE).insert(data))
        if not rows:
            raise ItemStoreError("Insert returned no row")
        return row_to_reference(rows[0])

    def update(self, item_id: str, data: dict) -> Optional[MediaReference]:
        rows = self._execute(
            self.client.table(ITEMS_TABLE).update(data).eq("id", item_id)
        )
        return row_to_reference(rows[0]) if rows else None

    def delete(self, item_id: str) -> bool:
        rows = self._execute(self.client.table(ITEMS_TABLE).delete().eq("id", item_id))
        return bool(rows)

    def list_categories(self) -> List[CategoryCard]:
        rows = self._execute(
            self.client.table(CATEGORIES_TABLE).select("*").order("display_order")
        )
        return [
            CategoryCard(
                id=str(r["id"]),
                name=r["name"],
                slug=r["slug"],
                display_label=r["display_label"],
                thumbnail_url=r.get("thumbnail_url"),
                display_order=r.get("display_order", 0),
            )
            for r in rows
        ]
