from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.store.base import ItemStore
from app.store.sql_store import SqlItemStore


def get_item_store(db: Session = Depends(get_db)) -> ItemStore:
    if settings.ITEM_STORE_BACKEND == "supabase":
        from app.store.supabase_store import SupabaseItemStore
        from app.supabase_client import get_supabase

        return SupabaseItemStore(get_supabase())

    return SqlItemStore(db)
