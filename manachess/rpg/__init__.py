"""RPG layer: abilities, the cast state machine and shield capture rules."""

from manachess.rpg.abilities import (
    ABILITY_BULWARK, ABILITY_CHARGE, Ability, AbilityKind, AbilityView,
    build_abilities, cast_blocker,
)
from manachess.rpg.captures import is_capture_blocked, resolve_blocked_capture
from manachess.rpg.resolver import (
    AbilityResolver, CastingMove, CastingTarget, Idle, IDLE, ResolverState,
)

__all__ = [
    "ABILITY_BULWARK", "ABILITY_CHARGE", "Ability", "AbilityKind", "AbilityView",
    "build_abilities", "cast_blocker",
    "is_capture_blocked", "resolve_blocked_capture",
    "AbilityResolver", "CastingMove", "CastingTarget", "Idle", "IDLE", "ResolverState",
]
