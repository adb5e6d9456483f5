"""Domain model for the Outpost tile decision layer.

This package hosts everything that can run without the network:

* Frozen dataclasses describing tile snapshots (see :mod:`models`).
* Enumerations for statuses, actions, commands and flow states.
* The eligibility rules deciding which actions a tile offers.
* Snapshot parsing and precedence-ordered merging of tile layers (import
  :mod:`outpost.domain.snapshots` directly; it depends on the wire schemas).
* Tick estimates used to tell players when deferred commands land.
"""

from . import eligibility, enums, models, tick

__all__ = [
    "eligibility",
    "enums",
    "models",
    "tick",
]
