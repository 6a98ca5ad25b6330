import uuid

from sqlalchemy import Column, String, Integer

from app.database import Base


class PortfolioCategoryCard(Base):
    __tablename__ = "portfolio_categories"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    display_label = Column(String, nullable=False)

    # Cover image for the category card
    thumbnail_url = Column(String, nullable=True)

    display_order = Column(Integer, nullable=False, default=0)
