from .tile import (
    GroupPayload,
    ItemPayload,
    PlayerPayload,
    StructurePayload,
    TilePayload,
    UnitPayload,
    WorldInfoPayload,
)

__all__ = [
    "GroupPayload",
    "ItemPayload",
    "PlayerPayload",
    "StructurePayload",
    "TilePayload",
    "UnitPayload",
    "WorldInfoPayload",
]
