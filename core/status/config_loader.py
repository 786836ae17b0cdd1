"""Configuration loading utilities for status classification."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.status.config_models import DEFAULT_PROFILE, AppConfiguration, ProfileConfig
from core.utils.log_events import log_event

logger = logging.getLogger("unitodo.config")

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default_config.yaml")


def load_config(path: Path | None = None) -> AppConfiguration:
    """Load and validate profile configuration from YAML.

    A missing ``default`` profile is filled in with the packaged state sets and
    an unknown ``active_profile`` falls back to ``default``. Profiles may carry
    scanner keys besides ``todo_states``; only ``todo_states`` is kept.
    """

    config_path = path or DEFAULT_CONFIG_PATH

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file: {config_path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    try:
        config = AppConfiguration.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid config schema: {config_path}") from exc

    return _normalize_profiles(config, config_path)


def default_state_sets() -> list[list[str]]:
    """Return the packaged default state sets."""

    return load_config(DEFAULT_CONFIG_PATH).active_state_sets()


def _normalize_profiles(config: AppConfiguration, config_path: Path) -> AppConfiguration:
    profiles = dict(config.profiles)
    active_profile = config.active_profile

    if DEFAULT_PROFILE not in profiles:
        if config_path == DEFAULT_CONFIG_PATH:
            raise ValueError(f"Packaged config lacks a default profile: {config_path}")
        profiles[DEFAULT_PROFILE] = ProfileConfig(todo_states=default_state_sets())
        log_event(
            logger,
            logging.WARNING,
            "default_profile_added",
            config_path=str(config_path),
        )

    if active_profile not in profiles:
        log_event(
            logger,
            logging.WARNING,
            "active_profile_reset",
            config_path=str(config_path),
            requested_profile=active_profile,
            active_profile=DEFAULT_PROFILE,
        )
        active_profile = DEFAULT_PROFILE

    return AppConfiguration(active_profile=active_profile, profiles=profiles)
