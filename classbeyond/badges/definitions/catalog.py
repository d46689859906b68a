"""Badge Catalog - read-only snapshot of the persisted badge definitions"""

import logging
from typing import Iterable, Iterator

from sqlalchemy.orm import Session

from classbeyond.badges.schemas.badge import BadgeDefinition
from classbeyond.core.data.repositories import BadgeRepository

logger = logging.getLogger(__name__)


class BadgeCatalog:
    """Immutable set of badge definitions with lookup helpers.

    Built once (usually at startup) and passed to whatever needs it, it holds
    no database handles and is safe to share between requests.
    """

    def __init__(self, badges: Iterable[BadgeDefinition], version: str | None = None):
        self._badges = tuple(sorted(badges, key=lambda b: b.id))
        self._by_id = {badge.id: badge for badge in self._badges}
        self._by_name = {badge.name: badge for badge in self._badges}
        self.version = version
        if len(self._by_name) != len(self._badges):
            raise ValueError("Badge names must be unique")

    @classmethod
    def from_db(cls, db: Session, version: str | None = None) -> "BadgeCatalog":
        """Snapshot the `badges` table, storage errors propagate"""
        rows = BadgeRepository(db).list_badges()
        catalog = cls((BadgeDefinition.from_row(row) for row in rows), version=version)
        logger.debug("Loaded badge catalog snapshot with %d badges", len(catalog))
        return catalog

    def __iter__(self) -> Iterator[BadgeDefinition]:
        return iter(self._badges)

    def __len__(self) -> int:
        return len(self._badges)

    def __contains__(self, badge_id: object) -> bool:
        return badge_id in self._by_id

    def get(self, badge_id: int) -> BadgeDefinition | None:
        return self._by_id.get(badge_id)

    def get_by_name(self, name: str) -> BadgeDefinition | None:
        return self._by_name.get(name)

    def get_by_type(self, badge_type: str) -> list[BadgeDefinition]:
        return [badge for badge in self._badges if badge.type == badge_type]

    def get_by_rarity(self, rarity: str) -> list[BadgeDefinition]:
        return [badge for badge in self._badges if badge.rarity == rarity]

    def get_by_requirement(self, requirement_type: str) -> list[BadgeDefinition]:
        return [
            badge for badge in self._badges if badge.requirement_type == requirement_type
        ]
