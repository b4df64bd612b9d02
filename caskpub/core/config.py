"""Typed project configuration.

Project-specific constants (GitHub repo, cask path, build target, artifact
naming) live in an optional ``release.toml`` at the project root::

    [release]
    repo = "owner/name"
    cask = "Casks/app.rb"
    asset_prefix = "App"

Any key that is absent falls back to the defaults below.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ReleaseSettings",
    "load_settings",
]

CONFIG_FILENAME = "release.toml"

DEFAULT_REPO = "jlcodes99/cockpit-tools"
DEFAULT_CASK_PATH = "Casks/cockpit-tools.rb"
DEFAULT_TARGET = "universal-apple-darwin"
DEFAULT_PRODUCT_NAME = "Cockpit Tools"
DEFAULT_ASSET_PREFIX = "Cockpit.Tools"
DEFAULT_ARTIFACTS_DIR = "release-artifacts"
DEFAULT_QUALIFIER = "_universal.dmg"
DEFAULT_GH = "gh"

_STR_KEYS = (
    "repo",
    "cask",
    "target",
    "product_name",
    "asset_prefix",
    "artifacts_dir",
    "qualifier",
    "gh",
)


def _default_build_command() -> tuple[str, ...]:
    return ("npm", "run", "tauri")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when release.toml cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """Release constants for one project."""

    repo: str = DEFAULT_REPO
    cask: str = DEFAULT_CASK_PATH
    target: str = DEFAULT_TARGET
    product_name: str = DEFAULT_PRODUCT_NAME
    asset_prefix: str = DEFAULT_ASSET_PREFIX
    artifacts_dir: str = DEFAULT_ARTIFACTS_DIR
    qualifier: str = DEFAULT_QUALIFIER
    gh: str = DEFAULT_GH
    build_command: tuple[str, ...] = field(default_factory=_default_build_command)

    @property
    def dmg_suffix(self) -> str:
        # "_universal.dmg" -> ".dmg"
        return Path(self.qualifier).suffix or ".dmg"

    def build_output_name(self, version: str) -> str:
        return f"{self.product_name}_{version}_universal{self.dmg_suffix}"

    def staged_name(self, version: str) -> str:
        return f"{self.asset_prefix}_{version}_universal{self.dmg_suffix}"

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[ReleaseSettings, ConfigError]:
        """Create settings from parsed TOML, validating value types."""
        table: StrDict = get_table(data, "release") or {}
        defaults = cls()

        values: dict[str, str] = {}
        for key in _STR_KEYS:
            if key not in table:
                values[key] = getattr(defaults, key)
                continue
            value = get_str(table, key)
            if value is None:
                return Err(ConfigError(f"release.{key} must be a non-empty string"))
            values[key] = value

        build_command = defaults.build_command
        if "build_command" in table:
            cmd = get_str_list(table, "build_command")
            if cmd is None:
                return Err(ConfigError("release.build_command must be a list of strings"))
            build_command = tuple(cmd)

        return Ok(cls(build_command=build_command, **values))


def load_settings(root: Path) -> Result[ReleaseSettings, ConfigError]:
    """Load ``release.toml`` from ``root``; defaults when the file is absent."""
    path = root / CONFIG_FILENAME
    if not path.exists():
        return Ok(ReleaseSettings())

    try:
        raw = path.read_bytes()
    except OSError as e:
        return Err(ConfigError(f"failed to read {CONFIG_FILENAME}: {e}", path=path))

    try:
        parsed: object = tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"invalid {CONFIG_FILENAME}: {e}", path=path))

    data = as_str_dict(parsed)
    if data is None:
        return Err(ConfigError(f"invalid {CONFIG_FILENAME} root", path=path))

    result = ReleaseSettings.from_dict(data)
    if isinstance(result, Err):
        return Err(ConfigError(result.error.message, path=path))
    return result
