from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from caskpub.core.config import ReleaseSettings
from caskpub.core.result import Err, Ok
from caskpub.release.errors import ConfigurationError
from caskpub.release.options import PublishOptions, resolve_options

_BOOL_FLAGS = ("skip_build", "skip_gh", "skip_cask", "dry_run", "draft", "generate_notes")


def test_defaults_come_from_settings() -> None:
    settings = ReleaseSettings(repo="acme/widget", cask="Casks/widget.rb")

    result = resolve_options(settings=settings)

    assert isinstance(result, Ok)
    assert result.value == PublishOptions(repo="acme/widget", cask_path=Path("Casks/widget.rb"))


def test_explicit_values_win() -> None:
    result = resolve_options(
        settings=ReleaseSettings(),
        tag="v9.9.9",
        repo="owner/app",
        cask="Casks/app.rb",
        asset_path="dist/App.dmg",
        notes_file="NOTES.md",
    )

    assert isinstance(result, Ok)
    opts = result.value
    assert opts.tag == "v9.9.9"
    assert opts.repo == "owner/app"
    assert opts.cask_path == Path("Casks/app.rb")
    assert opts.asset_path == Path("dist/App.dmg")
    assert opts.notes_file == Path("NOTES.md")


@pytest.mark.parametrize(
    "flags",
    [
        dict(zip(_BOOL_FLAGS, values, strict=True))
        for values in itertools.product((False, True), repeat=len(_BOOL_FLAGS))
    ],
)
def test_every_bool_combination_resolves(flags: dict[str, bool]) -> None:
    result = resolve_options(settings=ReleaseSettings(), tag="v1.0.0", **flags)

    assert isinstance(result, Ok)
    opts = result.value
    for name, value in flags.items():
        assert getattr(opts, name) is value
    assert opts.repo
    assert opts.cask_path


@pytest.mark.parametrize("extra", [{}, {"draft": True}, {"dry_run": True, "skip_build": True}])
def test_notes_file_and_generate_notes_are_exclusive(extra: dict[str, bool]) -> None:
    result = resolve_options(
        settings=ReleaseSettings(),
        notes_file="NOTES.md",
        generate_notes=True,
        **extra,
    )

    assert isinstance(result, Err)
    assert isinstance(result.error, ConfigurationError)
    assert "--notes-file" in result.error.message
    assert "--generate-notes" in result.error.message


@pytest.mark.parametrize(
    ("kwarg", "flag"),
    [
        ("tag", "--tag"),
        ("repo", "--repo"),
        ("cask", "--cask"),
        ("notes_file", "--notes-file"),
        ("asset_path", "--asset-path"),
    ],
)
def test_blank_value_names_flag(kwarg: str, flag: str) -> None:
    result = resolve_options(settings=ReleaseSettings(), **{kwarg: "  "})

    assert isinstance(result, Err)
    assert result.error.message == f"Missing value for {flag}"


@pytest.mark.parametrize("repo", ["owner", "owner/", "/app", "a/b/c"])
def test_repo_must_be_owner_slash_name(repo: str) -> None:
    result = resolve_options(settings=ReleaseSettings(), repo=repo)

    assert isinstance(result, Err)
    assert "--repo" in result.error.message


def test_release_tag_defaults_to_v_version() -> None:
    opts = PublishOptions(repo="o/r", cask_path=Path("c.rb"))
    assert opts.release_tag("2.3.1") == "v2.3.1"
    assert PublishOptions(repo="o/r", cask_path=Path("c.rb"), tag="x").release_tag("2.3.1") == "x"
