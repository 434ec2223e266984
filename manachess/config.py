"""Rule tunables for ManaChess, loaded from YAML and validated with pydantic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger("manachess.config")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "rules.yaml"


class ManaConfig(BaseModel):
    """A mana amount per side."""
    white: int = Field(..., ge=0)
    black: int = Field(..., ge=0)


class AbilityConfig(BaseModel):
    """Mana cost and cooldown (in turns) of one ability."""
    cost: int = Field(..., ge=0, description="Mana spent when the ability is cast")
    cooldown: int = Field(..., ge=0, description="Turns before the same piece may cast again")


class RulesConfig(BaseModel):
    """All rule tunables. Defaults match configs/rules.yaml."""
    starting_mana: ManaConfig = ManaConfig(white=2, black=2)
    max_mana: ManaConfig = ManaConfig(white=3, black=3)
    charge: AbilityConfig = AbilityConfig(cost=2, cooldown=2)
    bulwark: AbilityConfig = AbilityConfig(cost=1, cooldown=4)
    root_duration: int = Field(2, ge=1, description="Turns a Charge victim stays rooted")
    shield_duration: int = Field(1, ge=1, description="Turns a Bulwark shield outlives the cast")

    @model_validator(mode="after")
    def _starting_mana_within_cap(self) -> RulesConfig:
        if self.starting_mana.white > self.max_mana.white:
            raise ValueError("starting_mana.white exceeds max_mana.white")
        if self.starting_mana.black > self.max_mana.black:
            raise ValueError("starting_mana.black exceeds max_mana.black")
        return self


def load_config(path: Union[str, Path, None] = None) -> RulesConfig:
    """Load rules from a YAML file.

    The file may hold the rules at top level or under a ``rules:`` key.
    Missing keys fall back to the RulesConfig defaults.

    Args:
        path: YAML file to read. Defaults to configs/rules.yaml.
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    config = RulesConfig.model_validate(data.get("rules", data))
    logger.info(f"Loaded rules from {path}")
    return config
