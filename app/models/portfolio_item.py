import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Index

from app.database import Base
from app.core.media_resolver import MediaReference


class PortfolioItem(Base):
    __tablename__ = "portfolio_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    media_type = Column(String, nullable=False)  # photo / video
    category = Column(String, nullable=False, index=True)

    # Source link as entered in the admin console (stored in embed form)
    embed_url = Column(String, nullable=False)

    # Optional operator-supplied high resolution rendition
    full_url = Column(String, nullable=True)

    title = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_portfolio_items_category_created", "category", "created_at"),
    )

    def to_reference(self) -> MediaReference:
        return MediaReference(
            id=self.id,
            media_type=self.media_type,
            category=self.category,
            raw_url=self.embed_url,
            full_resolution_url=self.full_url,
            title=self.title,
            created_at=self.created_at,
        )
