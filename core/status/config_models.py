"""Data models for profile-aware todo status configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROFILE = "default"
MAX_STATES_PER_SET = 4


class ProfileConfig(BaseModel):
    """One named configuration profile.

    Rules:
    - todo_states is an ordered list of state sets (TODO, DOING, DONE, CANCELLED)
    - each set holds 1 to 4 non-empty markers
    - an empty list is legal and leaves every marker unclassified
    - keys owned by the scanner (rg, refresh_interval, editor_uri_scheme, ...)
      are accepted and dropped
    """

    model_config = ConfigDict(extra="ignore")

    todo_states: list[list[str]] = Field(default_factory=list)

    @field_validator("todo_states")
    @classmethod
    def _check_state_sets(cls, value: list[list[str]]) -> list[list[str]]:
        for index, state_set in enumerate(value):
            if not 1 <= len(state_set) <= MAX_STATES_PER_SET:
                raise ValueError(
                    f"todo_states[{index}] must hold 1-{MAX_STATES_PER_SET} markers"
                )
            if any(not marker for marker in state_set):
                raise ValueError(f"todo_states[{index}] contains an empty marker")
        return value


class AppConfiguration(BaseModel):
    """Top-level configuration holding named profiles."""

    model_config = ConfigDict(extra="forbid")

    active_profile: str = DEFAULT_PROFILE
    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)

    def active_config(self) -> ProfileConfig | None:
        return self.profiles.get(self.active_profile)

    def active_state_sets(self) -> list[list[str]]:
        profile = self.active_config()
        if profile is None:
            return []
        return [list(state_set) for state_set in profile.todo_states]
