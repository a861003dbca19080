"""Application settings for the workshop proposals app.

Settings come from two places: the ``WORKSHOP_DATA_DIR`` environment variable
picks the data directory (default ``data``), and an optional INI file
``<data>/app.ini`` overrides the proposal defaults::

    [app]
    dev = true

    [proposals]
    default_year = 2027
    org_tag = LaMaxima
    list_limit = 150
    require_name_to_advance = no

``DEV_MODE`` is True when ``WORKSHOP_DEV=1`` is set or ``[app] dev`` is truthy.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ProposalSettings:
    data_dir: Path
    default_year: str = "2026"
    brand_name: str = "LA MÁXIMA"
    organization: str = "Educational and Recreational Hub"
    org_tag: str = "LaMaxima"
    untitled_placeholder: str = "activity"
    list_limit: int = 200
    require_name_to_advance: bool = False

    @property
    def db_path(self) -> Path:
        return self.data_dir / "proposals.db"

    @property
    def draft_path(self) -> Path:
        return self.data_dir / "draft_cache.json"


def data_dir() -> Path:
    return Path(os.environ.get("WORKSHOP_DATA_DIR", "data"))


def _read_ini(directory: Path) -> configparser.ConfigParser:
    cp = configparser.ConfigParser(interpolation=None)
    ini_path = directory / "app.ini"
    if ini_path.exists():
        try:
            cp.read(ini_path, encoding="utf-8")
        except configparser.Error as exc:
            logger.warning("Ignoring unreadable %s: %s", ini_path, exc)
            return configparser.ConfigParser(interpolation=None)
    return cp


def _read_ini_flag(directory: Path | None = None) -> bool:
    cp = _read_ini(directory or data_dir())
    raw = cp.get("app", "dev", fallback="0").strip().lower()
    return raw in _TRUTHY


def load_settings(directory: Path | None = None) -> ProposalSettings:
    """Return :class:`ProposalSettings` for ``directory`` (or the env default)."""

    directory = Path(directory) if directory is not None else data_dir()
    defaults = ProposalSettings(data_dir=directory)
    cp = _read_ini(directory)
    if not cp.has_section("proposals"):
        return defaults

    section = cp["proposals"]
    list_limit = defaults.list_limit
    raw_limit = section.get("list_limit")
    if raw_limit is not None:
        try:
            list_limit = max(1, int(raw_limit))
        except ValueError:
            logger.warning("Invalid list_limit %r in app.ini; using %d", raw_limit, list_limit)
    require_name = defaults.require_name_to_advance
    raw_require = section.get("require_name_to_advance")
    if raw_require is not None:
        require_name = raw_require.strip().lower() in _TRUTHY

    return ProposalSettings(
        data_dir=directory,
        default_year=section.get("default_year", defaults.default_year).strip() or defaults.default_year,
        brand_name=section.get("brand_name", defaults.brand_name),
        organization=section.get("organization", defaults.organization),
        org_tag=section.get("org_tag", defaults.org_tag),
        untitled_placeholder=section.get("untitled_placeholder", defaults.untitled_placeholder),
        list_limit=list_limit,
        require_name_to_advance=require_name,
    )


DEV_MODE: bool = (
    str(os.environ.get("WORKSHOP_DEV", "0")).strip() in {"1", "true", "True"}
    or _read_ini_flag()
)


__all__ = ["DEV_MODE", "ProposalSettings", "data_dir", "load_settings"]
