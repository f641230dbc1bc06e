"""Alignment settings resolved from keyword arguments or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

ENV_PREFIX = "ALIGN_ENGINE_"
DEFAULT_TAB_WIDTH = 8


def _env_int(
    environ: Mapping[str, str], name: str, fallback: Optional[int]
) -> Optional[int]:
    raw = environ.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _split_ids(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class AlignSettings:
    """Knobs shared by the column finder, the host and the advance session.

    ``repeat_actions`` lists action ids that count as pressing the advance key
    again; the advance action itself is always included by the host.
    ``scan_limit`` bounds how many lines each scan direction may accept.
    """

    tab_width: int = DEFAULT_TAB_WIDTH
    repeat_actions: frozenset[str] = field(default_factory=frozenset)
    scan_limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.tab_width <= 0:
            raise ValueError("tab_width must be positive")
        if self.scan_limit is not None and self.scan_limit <= 0:
            raise ValueError("scan_limit must be positive when set")
        object.__setattr__(self, "repeat_actions", frozenset(self.repeat_actions))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AlignSettings":
        env = os.environ if environ is None else environ
        tab_width = _env_int(env, "TAB_WIDTH", DEFAULT_TAB_WIDTH)
        return cls(
            tab_width=DEFAULT_TAB_WIDTH if tab_width is None else tab_width,
            repeat_actions=_split_ids(env.get(f"{ENV_PREFIX}REPEAT_ACTIONS")),
            scan_limit=_env_int(env, "SCAN_LIMIT", None),
        )

    def with_repeat_actions(self, actions: Iterable[str]) -> "AlignSettings":
        return AlignSettings(
            tab_width=self.tab_width,
            repeat_actions=self.repeat_actions | frozenset(actions),
            scan_limit=self.scan_limit,
        )


__all__ = ["AlignSettings", "DEFAULT_TAB_WIDTH", "ENV_PREFIX"]
