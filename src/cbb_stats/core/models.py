"""
Pydantic models for game logs, aggregates and season tables.

These models are used for:
- Validating rows from the record store (upstream column names accepted as aliases)
- Carrying aggregates between the aggregator, ranker and assembler
- API response serialization

Every numeric stat is Optional: a missing value is never the same as zero.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, create_model, field_validator

from .types import AVERAGED_STATS, COUNTING_STATS, DERIVED_STATS


def _blank_to_none(value: Any) -> Any:
    """Upstream feeds encode missing numbers as empty strings."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# =============================================================================
# Game Log
# =============================================================================


class GameRecord(BaseModel):
    """One player's line for one game. Immutable once read from the store."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pid: int
    player_name: str = Field(default="", validation_alias=AliasChoices("player_name", "pp"))
    team: str = Field(validation_alias=AliasChoices("team", "tt"))
    year: int
    game_date: date = Field(validation_alias=AliasChoices("game_date", "numdate"))
    date_text: Optional[str] = Field(default=None, validation_alias=AliasChoices("date_text", "datetext"))
    opponent: str = ""
    muid: Optional[str] = None
    loc: Optional[str] = None
    player_class: Optional[str] = Field(default=None, validation_alias=AliasChoices("player_class", "cls"))

    # Counting stats
    pts: Optional[float] = None
    orb: Optional[float] = None
    drb: Optional[float] = None
    ast: Optional[float] = None
    tov: Optional[float] = None
    stl: Optional[float] = None
    blk: Optional[float] = None
    pf: Optional[float] = None
    possessions: Optional[float] = None
    dunks_made: Optional[int] = None
    dunks_att: Optional[int] = None
    rim_made: Optional[int] = None
    rim_att: Optional[int] = None
    mid_made: Optional[int] = None
    mid_att: Optional[int] = None
    two_pm: Optional[int] = None
    two_pa: Optional[int] = None
    tpm: Optional[int] = None
    tpa: Optional[int] = None
    ftm: Optional[int] = None
    fta: Optional[int] = None

    # Rates and ratings
    min_per: Optional[float] = None
    o_rtg: Optional[float] = None
    usage: Optional[float] = None
    e_fg: Optional[float] = None
    ts_per: Optional[float] = None
    orb_per: Optional[float] = None
    drb_per: Optional[float] = None
    ast_per: Optional[float] = None
    to_per: Optional[float] = None
    stl_per: Optional[float] = None
    blk_per: Optional[float] = None
    bpm_rd: Optional[float] = None
    obpm: Optional[float] = None
    dbpm: Optional[float] = None
    bpm_net: Optional[float] = None
    bpm: Optional[float] = None
    sbpm: Optional[float] = None

    # Game context
    inches: Optional[int] = None
    opstyle: Optional[int] = None
    quality: Optional[int] = None
    win1: Optional[int] = None
    win2: Optional[int] = None

    @field_validator(*AVERAGED_STATS, mode="before")
    @classmethod
    def _blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("game_date", mode="before")
    @classmethod
    def _parse_numdate(cls, value: Any) -> Any:
        """Accept the upstream compact YYYYMMDD form alongside ISO dates."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str) and len(value) == 8 and value.isdigit():
            return date(int(value[:4]), int(value[4:6]), int(value[6:]))
        return value

    def stat(self, name: str) -> Optional[float]:
        """Numeric stat by name, None when not recorded."""
        return getattr(self, name)


# =============================================================================
# Aggregates
# =============================================================================


class _AggregateBase(BaseModel):
    """Identity and span shared by season and rolling aggregates."""

    pid: int
    player_name: str
    team: str
    year: int
    games_played: int = 0
    first_game_date: Optional[date] = None
    last_game_date: Optional[date] = None

    @property
    def entity_key(self) -> tuple[int, str]:
        """Key used for percentile populations."""
        return (self.pid, self.team)


def _aggregate_fields() -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for stat in COUNTING_STATS:
        fields[f"{stat}_total"] = (Optional[float], None)
    for stat in AVERAGED_STATS:
        fields[f"avg_{stat}"] = (Optional[float], None)
    for stat in DERIVED_STATS:
        fields[stat] = (Optional[float], None)
    return fields


SeasonAggregate = create_model(
    "SeasonAggregate",
    __base__=_AggregateBase,
    __doc__="Season totals, per-game averages and derived ratios for one (player, team, year).",
    **_aggregate_fields(),
)


class RollingAggregate(SeasonAggregate):  # type: ignore[misc, valid-type]
    """SeasonAggregate restricted to a trailing window of game dates."""

    last_n_days: int
    window_start: Optional[date] = None

    @classmethod
    def empty(
        cls,
        pid: int,
        player_name: str,
        team: str,
        year: int,
        last_n_days: int,
    ) -> "RollingAggregate":
        """Aggregate for a player with no games in the window."""
        return cls(
            pid=pid,
            player_name=player_name,
            team=team,
            year=year,
            games_played=0,
            last_n_days=last_n_days,
        )


# =============================================================================
# Season Tables
# =============================================================================


class PlayerSeasonProfile(BaseModel):
    """Season-long player constants joined onto stat lines."""

    model_config = ConfigDict(extra="ignore")

    pid: int
    team: str
    year: int
    player_name: Optional[str] = None
    conf: Optional[str] = None
    player_type: Optional[str] = None  # Role
    yr: Optional[str] = None  # Class
    ht: Optional[str] = None  # Height
    porpag: Optional[float] = None
    dporpag: Optional[float] = None
    drtg: Optional[float] = None
    adjoe: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TeamSeasonResult(BaseModel):
    """Per-team season results row."""

    model_config = ConfigDict(extra="ignore")

    team: str
    year: int
    rank: Optional[int] = None
    conf: Optional[str] = None
    record: Optional[str] = None
    adjoe: Optional[float] = None
    adjde: Optional[float] = None
    barthag: Optional[float] = None
    wab: Optional[float] = None
    conf_win_perc: Optional[float] = None
    adj_tempo: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)
