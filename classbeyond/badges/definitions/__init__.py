"""Badge Definitions: YAML catalog, loader and in-memory catalog"""

from classbeyond.badges.definitions.catalog import BadgeCatalog
from classbeyond.badges.definitions.loader import initialize_badges, load_definitions

__all__ = ["BadgeCatalog", "initialize_badges", "load_definitions"]
