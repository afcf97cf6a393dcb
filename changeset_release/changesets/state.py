"""Reads pending changesets and pre-release state from the .changeset directory."""

import json
from pathlib import Path

import structlog
from ruamel.yaml import YAML

from changeset_release.changesets.exceptions import WorkspaceConfigurationError
from changeset_release.changesets.models import BumpLevel, Changeset, ChangesetRelease, ChangesetState, PreState
from changeset_release.utils.constants import CHANGESET_DIRECTORY

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")


def read_pre_state(cwd: Path) -> PreState | None:
    """Load .changeset/pre.json, or return None outside of pre-release mode."""
    path = cwd / CHANGESET_DIRECTORY / "pre.json"
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return PreState(
        mode=data.get("mode", "pre"),
        tag=data["tag"],
        initial_versions=data.get("initialVersions", {}),
        changesets=data.get("changesets", []),
    )


def parse_changeset(changeset_id: str, content: str) -> Changeset:
    """Parse a changeset file: YAML front matter of package bumps, then a summary.

    A file without front matter declares no releases.
    """
    lines = content.strip().split("\n")
    if not lines or lines[0].strip() != "---":
        return Changeset(id=changeset_id, summary=content.strip(), releases=[])

    try:
        closing = next(index for index, line in enumerate(lines[1:], start=1) if line.strip() == "---")
    except StopIteration as exc:
        raise WorkspaceConfigurationError(f"Changeset {changeset_id} has unterminated front matter") from exc

    front_matter = yaml.load("\n".join(lines[1:closing])) or {}
    releases: list[ChangesetRelease] = []
    for name, bump in front_matter.items():
        try:
            releases.append(ChangesetRelease(name=str(name), type=BumpLevel(str(bump).strip())))
        except ValueError as exc:
            raise WorkspaceConfigurationError(f"Changeset {changeset_id} has an invalid bump type '{bump}' for {name}") from exc
    summary = "\n".join(lines[closing + 1 :]).strip()
    return Changeset(id=changeset_id, summary=summary, releases=releases)


def read_changesets(cwd: Path) -> list[Changeset]:
    """Parse every changeset file in .changeset, ignoring its README."""
    directory = cwd / CHANGESET_DIRECTORY
    if not directory.is_dir():
        return []
    changesets: list[Changeset] = []
    for path in sorted(directory.glob("*.md")):
        if path.name.lower() == "readme.md":
            continue
        changesets.append(parse_changeset(path.stem, path.read_text(encoding="utf-8")))
    return changesets


def read_changeset_state(cwd: Path) -> ChangesetState:
    """Return the pending changesets and the pre-release state.

    In pre-release mode, changesets already consumed by a previous pre-release
    are not pending.
    """
    pre_state = read_pre_state(cwd)
    changesets = read_changesets(cwd)
    if pre_state is not None and pre_state.mode == "pre":
        consumed = set(pre_state.changesets)
        changesets = [changeset for changeset in changesets if changeset.id not in consumed]
    logger.info(
        "Read changeset state",
        pending_changesets=len(changesets),
        pre_release_tag=pre_state.tag if pre_state else None,
    )
    return ChangesetState(pre_state=pre_state, changesets=changesets)
