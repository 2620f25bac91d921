"""
Wall type catalog.

Display names are the German tender terms; DIN 276 cost groups and overlay
colours are consumed by the report and rendering collaborators.
"""

from enum import Enum
from typing import Dict


class WallType(str, Enum):
    EXTERIOR = "exterior"
    INSULATED = "insulated"
    LOAD_BEARING = "load_bearing"
    PARTITION = "partition"
    DRYWALL = "drywall"


WALL_TYPE_CATALOG: Dict[WallType, Dict[str, str]] = {
    WallType.EXTERIOR: {
        "name": "Außenwände (Exterior)",
        "din_code": "331",
        "annotation_color": "#0000FF",
    },
    WallType.INSULATED: {
        "name": "Gedämmte Wände (Insulated)",
        "din_code": "334",
        "annotation_color": "#FF00FF",
    },
    WallType.LOAD_BEARING: {
        "name": "Tragende Wände (Load-bearing)",
        "din_code": "341",
        "annotation_color": "#FF0000",
    },
    WallType.PARTITION: {
        "name": "Nichttragende Wände (Partition)",
        "din_code": "342",
        "annotation_color": "#00FF00",
    },
    WallType.DRYWALL: {
        "name": "Trockenbauwände (Drywall)",
        "din_code": "346",
        "annotation_color": "#00FFFF",
    },
}


def display_name(wall_type: WallType) -> str:
    return WALL_TYPE_CATALOG[wall_type]["name"]


def din_code(wall_type: WallType) -> str:
    return WALL_TYPE_CATALOG[wall_type]["din_code"]
