import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.media_resolver import MediaReference
from app.models.portfolio_category import PortfolioCategoryCard
from app.models.portfolio_item import PortfolioItem
from app.store.base import CategoryCard, ItemStore, ItemStoreError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("media_type", "category", "embed_url", "full_url", "title")


class SqlItemStore(ItemStore):
    def __init__(self, db: Session):
        self.db = db

    def list_media_references(self, category=None, media_type=None, newest_first=True):
        query = self.db.query(PortfolioItem)

        if category:
            query = query.filter(PortfolioItem.category == category)
        if media_type:
            query = query.filter(PortfolioItem.media_type == media_type)

        order = PortfolioItem.created_at.desc() if newest_first else PortfolioItem.created_at.asc()
        return [row.to_reference() for row in query.order_by(order).all()]

    def _row(self, item_id: str) -> Optional[PortfolioItem]:
        return self.db.query(PortfolioItem).filter(PortfolioItem.id == item_id).first()

    def get(self, item_id: str) -> Optional[MediaReference]:
        row = self._row(item_id)
        return row.to_reference() if row else None

    def create(self, data: dict) -> MediaReference:
        row = PortfolioItem(**{k: data.get(k) for k in EDITABLE_FIELDS})
        if data.get("created_at"):
            row.created_at = data["created_at"]
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return row.to_reference()

    def update(self, item_id: str, data: dict) -> Optional[MediaReference]:
        row = self._row(item_id)
        if not row:
            return None

        for key in EDITABLE_FIELDS:
            if key in data:
                setattr(row, key, data[key])

        self._commit()
        self.db.refresh(row)
        return row.to_reference()

    def delete(self, item_id: str) -> bool:
        row = self._row(item_id)
        if not row:
            return False

        self.db.delete(row)
        self._commit()
        return True

    def list_categories(self) -> List[CategoryCard]:
        rows = (
            self.db.query(PortfolioCategoryCard)
            .order_by(PortfolioCategoryCard.display_order.asc())
            .all()
        )
        return [
            CategoryCard(
                id=r.id,
                name=r.name,
                slug=r.slug,
                display_label=r.display_label,
                thumbnail_url=r.thumbnail_url,
                display_order=r.display_order,
            )
            for r in rows
        ]

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Portfolio store commit failed")
            raise ItemStoreError(str(e)) from e
