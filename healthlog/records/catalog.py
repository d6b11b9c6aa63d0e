"""
Trackable item catalogs.

Ids are the join keys stored inside every daily log; once shipped an id must
never change. Names are display-only and may be edited freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ItemGroup(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    EXERCISE = "Exercise"


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    group: ItemGroup


SUPPLEMENTS: Tuple[CatalogItem, ...] = (
    CatalogItem("berberine_morning", "Berberine – Morning", ItemGroup.MORNING),
    CatalogItem("vitamin_d3", "Vitamin D3", ItemGroup.MORNING),
    CatalogItem("vitamin_k2", "Vitamin K2", ItemGroup.MORNING),
    CatalogItem("nr", "NR", ItemGroup.MORNING),
    CatalogItem("astaxanthin", "Astaxanthin", ItemGroup.MORNING),
    CatalogItem("metformin", "Metformin", ItemGroup.MORNING),
    CatalogItem("berberine_afternoon", "Berberine – Afternoon", ItemGroup.AFTERNOON),
    CatalogItem("vitamin_c", "Vitamin C", ItemGroup.AFTERNOON),
    CatalogItem("multivitamin", "Multivitamin", ItemGroup.AFTERNOON),
    CatalogItem("sugar_support", "Sugar Support", ItemGroup.AFTERNOON),
    CatalogItem("omega_3", "Omega 3", ItemGroup.AFTERNOON),
    CatalogItem("tmg", "TMG", ItemGroup.AFTERNOON),
    CatalogItem("nac", "NAC", ItemGroup.EVENING),
    CatalogItem("magnesium", "Magnesium", ItemGroup.EVENING),
    CatalogItem("taurine", "Taurine", ItemGroup.EVENING),
    CatalogItem("collagen", "Collagen", ItemGroup.EVENING),
    CatalogItem("protein_powder", "Protein Powder 84g", ItemGroup.EVENING),
    CatalogItem("cinnamon", "Cinnamon", ItemGroup.EVENING),
    CatalogItem("apple_cider_vinegar", "Apple Cider Vinegar", ItemGroup.EVENING),
    CatalogItem("creatine", "Creatine 10g", ItemGroup.EVENING),
    CatalogItem("probiotic", "Probiotic", ItemGroup.EVENING),
    CatalogItem("ubiquinol", "Ubiquinol", ItemGroup.EVENING),
)

EXERCISES: Tuple[CatalogItem, ...] = (
    CatalogItem("treadmill", "Half Hour Treadmill", ItemGroup.EXERCISE),
    CatalogItem("foot_exercise", "Foot Exercise", ItemGroup.EXERCISE),
    CatalogItem("shoulder_exercise", "Shoulder Exercise", ItemGroup.EXERCISE),
    CatalogItem("weight_training", "Weight Training", ItemGroup.EXERCISE),
)

SUPPLEMENT_IDS: Tuple[str, ...] = tuple(s.id for s in SUPPLEMENTS)
EXERCISE_IDS: Tuple[str, ...] = tuple(e.id for e in EXERCISES)


def supplements_by_group() -> Dict[ItemGroup, Tuple[CatalogItem, ...]]:
    """Supplements bucketed by time of day, catalog order kept within a slot."""
    groups: Dict[ItemGroup, Tuple[CatalogItem, ...]] = {}
    for item in SUPPLEMENTS:
        groups[item.group] = groups.get(item.group, ()) + (item,)
    return groups
