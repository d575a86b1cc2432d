"""
Liquid Library Management
=========================
Defines the liquids that can fill the basin and the tubes.

Only one liquid is active at a time: the surrounding basin and every tube
share it. A liquid is described by its display colour and its density; the
density is the only property the physics needs.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import StrEnum
from typing import Any, Dict, List, Optional
import json
import logging

logger = logging.getLogger(__name__)


class LiquidKind(StrEnum):
    MERCURY = "Mercury"
    WATER = "Water"
    SALT_WATER = "Salt Water"
    OIL = "Oil"
    MYSTERY = "Mystery"


@dataclass
class LiquidType:
    """A liquid: display name, matplotlib-compatible colour and density in kg/m³."""
    name: str
    color: str
    density: float

    def __post_init__(self) -> None:
        if self.density <= 0.0:
            raise ValueError(f"Liquid '{self.name}' must have a positive density, got {self.density}.")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> LiquidType:
        return LiquidType(
            name=data.get("name", "Unnamed Liquid"),
            color=data.get("color", "#4040ff"),
            density=float(data["density"]),
        )


# Built-in liquids. The mystery liquid's density is a placeholder that the
# density puzzle overwrites.
BUILTIN_LIQUIDS: Dict[LiquidKind, LiquidType] = {
    LiquidKind.MERCURY: LiquidType(name=LiquidKind.MERCURY, color="#808080", density=13534.0),
    LiquidKind.WATER: LiquidType(name=LiquidKind.WATER, color="#4040ff", density=1000.0),
    LiquidKind.SALT_WATER: LiquidType(name=LiquidKind.SALT_WATER, color="#000080", density=1027.0),
    LiquidKind.OIL: LiquidType(name=LiquidKind.OIL, color="#ffff80", density=920.0),
    LiquidKind.MYSTERY: LiquidType(name=LiquidKind.MYSTERY, color="#00ff00", density=1000.0),
}


def builtin_liquid(kind: LiquidKind) -> LiquidType:
    """Return a fresh copy of a built-in liquid so callers may mutate it."""
    template = BUILTIN_LIQUIDS[kind]
    return LiquidType(name=template.name, color=template.color, density=template.density)


class LiquidLibrary:
    """
    Manages a library of liquids, including loading from JSON files
    and retrieving liquid definitions by name.
    """
    def __init__(self) -> None:
        self.liquids: Dict[str, LiquidType] = {}
        self._init_defaults()

    def _init_defaults(self) -> None:
        for kind in LiquidKind:
            if kind == LiquidKind.MYSTERY:
                continue
            self.liquids[str(kind)] = builtin_liquid(kind)

    def add_liquid(self, liquid: LiquidType) -> None:
        """Add or update a liquid in the library."""
        self.liquids[liquid.name] = liquid

    def get_liquid(self, name: str) -> Optional[LiquidType]:
        """Retrieve a liquid by name."""
        return self.liquids.get(name)

    def get_names(self) -> List[str]:
        """List all liquid names in the library."""
        return list(self.liquids.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {"liquids": [liquid.to_dict() for liquid in self.liquids.values()]}

    def save(self, filepath: str) -> None:
        logger.info(f"Saving liquid library to: {filepath}")
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=4)

    @classmethod
    def from_file(cls, filepath: str) -> LiquidLibrary:
        """Built-in liquids plus every liquid listed in a JSON file."""
        library = cls()
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            for entry in data.get("liquids", []):
                library.add_liquid(LiquidType.from_dict(entry))
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Liquid library import failed: {e}")
            raise IOError(f"Failed to read liquid library: {e}")

        logger.debug(f"Loaded {len(library.liquids)} liquids from {filepath}")
        return library
