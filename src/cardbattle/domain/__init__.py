"""Domain model and rules of the card battle engine.

This package hosts everything the engine decides on its own:

* Dataclasses and strongly typed identifiers (see :mod:`models`).
* The error taxonomy reported to collaborators (see :mod:`errors`).
* Rule configuration objects (see :mod:`rules_config`).
* Pure rule functions: card normalization, roster lookup, round resolution
  and the battle lifecycle.

Nothing in here touches storage or transport; persistence adapters and the
HTTP layer translate to and from these types.
"""

from . import cards, enums, errors, lifecycle, models, roster, rounds, rules_config

__all__ = [
    "cards",
    "enums",
    "errors",
    "lifecycle",
    "models",
    "roster",
    "rounds",
    "rules_config",
]
