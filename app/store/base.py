from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from app.core.media_resolver import MediaReference


class ItemStoreError(Exception):
    """The backing store could not complete an operation."""


@dataclass(frozen=True)
class CategoryCard:
    id: str
    name: str
    slug: str
    display_label: str
    thumbnail_url: Optional[str]
    display_order: int


class ItemStore(ABC):
    """
    Portfolio item store.

    ``create``/``update`` take the row fields (``media_type``, ``category``,
    ``embed_url``, ``full_url``, ``title``); listing is newest first unless
    the caller asks otherwise.
    """

    @abstractmethod
    def list_media_references(
        self,
        category: Optional[str] = None,
        media_type: Optional[str] = None,
        newest_first: bool = True,
    ) -> List[MediaReference]:
        ...

    @abstractmethod
    def get(self, item_id: str) -> Optional[MediaReference]:
        ...

    @abstractmethod
    def create(self, data: dict) -> MediaReference:
        ...

    @abstractmethod
    def update(self, item_id: str, data: dict) -> Optional[MediaReference]:
        """Returns None when the item does not exist."""
        ...

    @abstractmethod
    def delete(self, item_id: str) -> bool:
        ...

    @abstractmethod
    def list_categories(self) -> List[CategoryCard]:
        """Category cards ordered by ``display_order``."""
        ...
