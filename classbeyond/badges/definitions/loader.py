"""YAML Definition Loader for Badges"""

import logging
from pathlib import Path

import yaml
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classbeyond.badges.schemas.badge import CatalogFile
from classbeyond.config import settings
from classbeyond.core.data.repositories import BadgeRepository

logger = logging.getLogger(__name__)

DEFAULT_DEFINITIONS_PATH = Path(__file__).parent / "badges.yaml"


def get_definitions_path() -> Path:
    if settings.BADGE_DEFINITIONS_PATH:
        return Path(settings.BADGE_DEFINITIONS_PATH)
    return DEFAULT_DEFINITIONS_PATH


def load_definitions(path: Path | None = None) -> CatalogFile:
    """Load and validate the badge definitions file.
    Raises pydantic.ValidationError on duplicate names or bad thresholds.
    """
    path = path or get_definitions_path()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return CatalogFile(**data)


def initialize_badges(db: Session, definitions: CatalogFile | None = None) -> int:
    """Seed the badge catalog if it is empty.

    Safe to call on every process start. Returns the number of rows inserted,
    0 when the catalog was already populated or another process won the race.
    """
    definitions = definitions or load_definitions()
    repo = BadgeRepository(db)

    if repo.count() > 0:
        logger.debug("Badge catalog already initialized")
        return 0

    logger.info("Initializing badges (catalog version %s)...", definitions.version)
    try:
        inserted = repo.bulk_insert(
            [badge.model_dump(mode="json") for badge in definitions.badges]
        )
        db.commit()
    except IntegrityError as e:
        # a concurrent initializer inserted first, unique(name) rejected ours
        db.rollback()
        logger.warning("Badge catalog initialized concurrently, skipping: %s", e.orig)
        return 0

    logger.info("Initialized %d badges", inserted)
    return inserted
