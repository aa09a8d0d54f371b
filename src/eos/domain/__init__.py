"""Rules core for EOS.

This package is pure and side-effect free.  It exposes:

* Enumerations and dataclasses describing the game state (see :mod:`models`).
* Rule configuration objects and the built-in rule table (see :mod:`rules_config`).
* Move generation, attack resolution and capture execution.
* The turn state machine (:class:`turn.Game`) and scoring.

Persistence and transport live outside this package and talk to it only
through :class:`turn.Game` and :mod:`eos.snapshot`.
"""

from . import (
    attack,
    capture,
    enums,
    layout,
    models,
    movement,
    rules_config,
    scoring,
    turn,
)

__all__ = [
    "attack",
    "capture",
    "enums",
    "layout",
    "models",
    "movement",
    "rules_config",
    "scoring",
    "turn",
]
