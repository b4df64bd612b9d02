from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from caskpub.core.result import Err, Ok, Result
from caskpub.core.structured import as_str_dict, get_str, get_table
from caskpub.release.errors import ConfigurationError, FilesystemError

VersionError = ConfigurationError | FilesystemError

_CARGO_VERSION_RE = re.compile(r'(?m)^version\s*=\s*"([^"]+)"\s*$')


@dataclass(frozen=True, slots=True)
class VersionFiles:
    package_json: Path
    tauri_conf: Path
    cargo_toml: Path


def version_files(root: Path) -> VersionFiles:
    return VersionFiles(
        package_json=root / "package.json",
        tauri_conf=root / "src-tauri" / "tauri.conf.json",
        cargo_toml=root / "src-tauri" / "Cargo.toml",
    )


def read_release_version(root: Path) -> Result[str, VersionError]:
    """Version from package.json, cross-checked against the Tauri files.

    ``tauri.conf.json`` and ``Cargo.toml`` are optional; when present and
    carrying an explicit version it must equal the package.json one.
    """
    files = version_files(root)
    if not files.package_json.exists():
        return Err(
            ConfigurationError(
                f"package.json not found: {files.package_json}",
                hint="Run from the project root or pass --root",
            )
        )

    pkg = _read_json_version(files.package_json)
    if isinstance(pkg, Err):
        return pkg
    if pkg.value is None:
        return Err(ConfigurationError("package.json.version is missing"))
    version = pkg.value

    others: list[tuple[str, str]] = []
    if files.tauri_conf.exists():
        tauri = _read_json_version(files.tauri_conf)
        if isinstance(tauri, Err):
            return tauri
        if tauri.value is not None:
            others.append(("tauri.conf.json", tauri.value))

    if files.cargo_toml.exists():
        cargo = _read_cargo_version(files.cargo_toml)
        if isinstance(cargo, Err):
            return cargo
        if cargo.value is not None:
            others.append(("Cargo.toml", cargo.value))

    drifted = [(name, v) for name, v in others if v != version]
    if drifted:
        detail = ", ".join(f"{name}={v}" for name, v in [("package.json", version), *others])
        return Err(ConfigurationError("version files are out of sync", hint=detail))

    return Ok(version)


def _read_text(path: Path) -> Result[str, FilesystemError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(FilesystemError(f"failed to read {path.name}: {e}", hint=str(path)))


def _read_json_version(path: Path) -> Result[str | None, VersionError]:
    text = _read_text(path)
    if isinstance(text, Err):
        return text

    try:
        obj: object = json.loads(text.value)
    except json.JSONDecodeError as e:
        return Err(ConfigurationError(f"invalid JSON in {path.name}: {e}", hint=str(path)))

    data = as_str_dict(obj)
    if data is None:
        return Err(ConfigurationError(f"invalid JSON root in {path.name}", hint=str(path)))

    value = get_str(data, "version")
    if value is None:
        # Tauri v1 keeps it under package.version
        package = get_table(data, "package")
        if package is not None:
            value = get_str(package, "version")
    if value is not None and value.endswith(".json"):
        # Tauri v2 may point at package.json instead of repeating the version.
        return Ok(None)
    return Ok(value)


def _read_cargo_version(path: Path) -> Result[str | None, VersionError]:
    text = _read_text(path)
    if isinstance(text, Err):
        return text

    pkg_idx = text.value.find("[package]")
    if pkg_idx < 0:
        return Ok(None)

    section = text.value[pkg_idx + len("[package]") :]
    next_table = re.search(r"(?m)^\[", section)
    if next_table is not None:
        section = section[: next_table.start()]

    # `version.workspace = true` does not match and is ignored.
    m = _CARGO_VERSION_RE.search(section)
    return Ok(m.group(1) if m is not None else None)
