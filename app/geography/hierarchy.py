"""Static continent -> sub-region -> country hierarchy and label expansion."""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

logger = logging.getLogger(__name__)


# Continent -> sub-region -> countries. Labels match the values offered to
# sellers (deal geography) and buyers (target countries).
GEOGRAPHY_HIERARCHY: Mapping[str, Mapping[str, tuple[str, ...]]] = MappingProxyType({
    "Africa": MappingProxyType({
        "North Africa": (
            "Algeria", "Egypt", "Libya", "Morocco", "Sudan", "Tunisia",
        ),
        "Sub-Saharan Africa": (
            "Angola", "Benin", "Botswana", "Burkina Faso", "Cameroon", "Cote d'Ivoire",
            "Democratic Republic of the Congo", "Ethiopia", "Ghana", "Kenya", "Madagascar",
            "Malawi", "Mali", "Mauritius", "Mozambique", "Namibia", "Niger", "Nigeria",
            "Rwanda", "Senegal", "South Africa", "Tanzania", "Uganda", "Zambia", "Zimbabwe",
        ),
    }),
    "Asia": MappingProxyType({
        "East Asia": (
            "China", "Hong Kong", "Japan", "Mongolia", "South Korea", "Taiwan",
        ),
        "South Asia": (
            "Bangladesh", "India", "Nepal", "Pakistan", "Sri Lanka",
        ),
        "Southeast Asia": (
            "Cambodia", "Indonesia", "Malaysia", "Myanmar", "Philippines", "Singapore",
            "Thailand", "Vietnam",
        ),
        "Central Asia": (
            "Kazakhstan", "Kyrgyzstan", "Tajikistan", "Turkmenistan", "Uzbekistan",
        ),
        "Middle East": (
            "Bahrain", "Iraq", "Israel", "Jordan", "Kuwait", "Lebanon", "Oman", "Qatar",
            "Saudi Arabia", "Turkey", "United Arab Emirates",
        ),
    }),
    "Europe": MappingProxyType({
        "Western Europe": (
            "Austria", "Belgium", "France", "Germany", "Liechtenstein", "Luxembourg",
            "Monaco", "Netherlands", "Switzerland",
        ),
        "Northern Europe": (
            "Denmark", "Estonia", "Finland", "Iceland", "Ireland", "Latvia", "Lithuania",
            "Norway", "Sweden", "United Kingdom",
        ),
        "Southern Europe": (
            "Croatia", "Cyprus", "Greece", "Italy", "Malta", "Portugal", "Slovenia", "Spain",
        ),
        "Eastern Europe": (
            "Bulgaria", "Czech Republic", "Hungary", "Poland", "Romania", "Serbia",
            "Slovakia", "Ukraine",
        ),
    }),
    "North America": MappingProxyType({
        "Northern America": (
            "Canada", "United States",
        ),
        "Central America": (
            "Belize", "Costa Rica", "El Salvador", "Guatemala", "Honduras", "Mexico",
            "Nicaragua", "Panama",
        ),
        "Caribbean": (
            "Bahamas", "Barbados", "Dominican Republic", "Jamaica", "Puerto Rico",
            "Trinidad and Tobago",
        ),
    }),
    "South America": MappingProxyType({
        "Andean States": (
            "Bolivia", "Colombia", "Ecuador", "Peru", "Venezuela",
        ),
        "Southern Cone": (
            "Argentina", "Brazil", "Chile", "Paraguay", "Uruguay",
        ),
    }),
    "Oceania": MappingProxyType({
        "Australia and New Zealand": (
            "Australia", "New Zealand",
        ),
        "Pacific Islands": (
            "Fiji", "Papua New Guinea", "Samoa",
        ),
    }),
})


def _build_index(
    hierarchy: Mapping[str, Mapping[str, Iterable[str]]],
) -> tuple[dict[str, frozenset[str]], dict[str, frozenset[str]]]:
    """Flatten the hierarchy into ancestor and descendant lookups."""
    ancestors: dict[str, set[str]] = {}
    descendants: dict[str, set[str]] = {}

    for continent, regions in hierarchy.items():
        ancestors.setdefault(continent, set())
        descendants.setdefault(continent, set())
        for region, countries in regions.items():
            ancestors.setdefault(region, set()).add(continent)
            descendants.setdefault(region, set())
            descendants[continent].add(region)
            for country in countries:
                ancestors.setdefault(country, set()).update((region, continent))
                descendants.setdefault(country, set())
                descendants[region].add(country)
                descendants[continent].add(country)

    return (
        {label: frozenset(values) for label, values in ancestors.items()},
        {label: frozenset(values) for label, values in descendants.items()},
    )


_ANCESTORS, _DESCENDANTS = _build_index(GEOGRAPHY_HIERARCHY)


def is_known(label: Optional[str]) -> bool:
    """Whether the label appears anywhere in the hierarchy."""
    return bool(label) and label in _ANCESTORS


def parents_of(label: Optional[str]) -> frozenset[str]:
    """Every region and continent containing the label."""
    if not label:
        return frozenset()
    return _ANCESTORS.get(label, frozenset())


def children_of(label: Optional[str]) -> frozenset[str]:
    """Every sub-region and country inside the label."""
    if not label:
        return frozenset()
    return _DESCENDANTS.get(label, frozenset())


def expand(label: Optional[str]) -> frozenset[str]:
    """
    Expand a country or region into every label it should match.

    The result holds the label itself, the regions and continent that
    contain it, and for a region or continent every sub-region and country
    inside it. Unknown labels expand to themselves only. A blank label
    expands to nothing, so it can never intersect a target list.

    Args:
        label: A country, sub-region or continent name

    Returns:
        Frozen set of equivalent geography labels
    """
    if not label:
        return frozenset()

    if label not in _ANCESTORS:
        logger.debug(f"Unknown geography label {label!r}, matching exactly")
        return frozenset({label})

    return frozenset({label}) | _ANCESTORS[label] | _DESCENDANTS[label]
