"""Geography reference data."""

from .hierarchy import GEOGRAPHY_HIERARCHY, expand, parents_of, children_of, is_known

__all__ = ["GEOGRAPHY_HIERARCHY", "expand", "parents_of", "children_of", "is_known"]
