"""
carebook.config.scheduling – knobs of the recurring schedule engine.

Env vars: SCHEDULE_HORIZON_CYCLES, SCHEDULE_MAX_SPAN_YEARS,
SCHEDULE_DEFAULT_TEXT_COLOR, SCHEDULE_LOCALE.

Defaults are the production values: 52 cycles, one year, #1890FF, Portuguese.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from carebook.core.validators import is_hex_color

SUPPORTED_LOCALES = ("pt", "en")


@dataclass(frozen=True)
class SchedulingConfig:
    """Expansion horizon, default event color and rendering locale."""

    horizon_cycles: int = 52
    """Hard cap on recurrence cycles per expansion, whatever the recurrency."""

    max_span_years: int = 1
    """No occurrence may start later than start_date + this many calendar years."""

    default_text_color: str = "#1890FF"
    locale: str = "pt"

    def __post_init__(self) -> None:
        if isinstance(self.horizon_cycles, bool) or not isinstance(self.horizon_cycles, int) or self.horizon_cycles < 1:
            raise ValueError(f"horizon_cycles must be an integer >= 1, got {self.horizon_cycles!r}")
        if isinstance(self.max_span_years, bool) or not isinstance(self.max_span_years, int) or self.max_span_years < 1:
            raise ValueError(f"max_span_years must be an integer >= 1, got {self.max_span_years!r}")
        if not is_hex_color(self.default_text_color):
            raise ValueError(f"default_text_color must be a hex color, got {self.default_text_color!r}")
        if self.locale not in SUPPORTED_LOCALES:
            raise ValueError(f"locale must be one of {SUPPORTED_LOCALES}, got {self.locale!r}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides: Any) -> "SchedulingConfig":
        env = os.environ if env is None else env

        def _pick(attr: str, var: str, default: Any) -> Any:
            if overrides.get(attr) is not None:
                return overrides[attr]
            return env.get(var, default)

        return cls(
            horizon_cycles=int(_pick("horizon_cycles", "SCHEDULE_HORIZON_CYCLES", 52)),
            max_span_years=int(_pick("max_span_years", "SCHEDULE_MAX_SPAN_YEARS", 1)),
            default_text_color=str(_pick("default_text_color", "SCHEDULE_DEFAULT_TEXT_COLOR", "#1890FF")),
            locale=str(_pick("locale", "SCHEDULE_LOCALE", "pt")).lower(),
        )


def load_scheduling_config(**overrides: Any) -> SchedulingConfig:
    """Load and validate scheduling config from the environment. Raises ValueError."""
    return SchedulingConfig.from_env(**overrides)
