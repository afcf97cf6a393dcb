"""Discovers the packages of a JavaScript workspace and tracks their versions."""

import json
from pathlib import Path
from typing import Any

import structlog
from ruamel.yaml import YAML

from changeset_release.changesets.exceptions import WorkspaceConfigurationError
from changeset_release.changesets.models import Package, Packages

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")


def read_package_json(directory: Path) -> dict[str, Any]:
    """Load the package.json in `directory`."""
    path = directory / "package.json"
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise WorkspaceConfigurationError(f"No package.json found in {directory}") from exc
    except json.JSONDecodeError as exc:
        raise WorkspaceConfigurationError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise WorkspaceConfigurationError(f"Expected a JSON object in {path}")
    return data


def _workspace_globs(cwd: Path, root_package_json: dict[str, Any]) -> tuple[str, list[str]]:
    """Return the workspace tool and its package globs."""
    pnpm_workspace = cwd / "pnpm-workspace.yaml"
    if pnpm_workspace.exists():
        with open(pnpm_workspace, encoding="utf-8") as f:
            data = yaml.load(f) or {}
        return "pnpm", list(data.get("packages") or [])

    workspaces = root_package_json.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if not workspaces:
        return "root", []
    tool = "yarn" if (cwd / "yarn.lock").exists() else "npm"
    return tool, list(workspaces)


def _expand_globs(cwd: Path, globs: list[str]) -> list[Path]:
    included: set[Path] = set()
    excluded: set[Path] = set()
    for pattern in globs:
        target = excluded if pattern.startswith("!") else included
        for match in cwd.glob(pattern.lstrip("!").rstrip("/")):
            if match.is_dir() and (match / "package.json").exists() and "node_modules" not in match.parts:
                target.add(match)
    return sorted(included - excluded)


def get_packages(cwd: Path) -> Packages:
    """Find the root package and every workspace package under `cwd`."""
    root_package_json = read_package_json(cwd)
    root = Package(directory=cwd, package_json=root_package_json)
    tool, globs = _workspace_globs(cwd, root_package_json)
    if tool == "root":
        logger.debug("No workspaces configured, treating repository as a single package", cwd=str(cwd))
        return Packages(tool=tool, root=root, packages=[root])

    packages = [Package(directory=directory, package_json=read_package_json(directory)) for directory in _expand_globs(cwd, globs)]
    logger.debug("Discovered workspace packages", tool=tool, count=len(packages))
    return Packages(tool=tool, root=root, packages=packages)


def get_versions_by_directory(cwd: Path) -> dict[Path, str]:
    """Snapshot the version of every package, keyed by package directory."""
    return {package.directory: package.version for package in get_packages(cwd).packages}


def get_changed_packages(cwd: Path, previous_versions: dict[Path, str]) -> list[Package]:
    """Return the packages whose version changed since `previous_versions` was taken."""
    changed = [package for package in get_packages(cwd).packages if previous_versions.get(package.directory) != package.version]
    logger.info("Found changed packages", packages=[f"{package.name}@{package.version}" for package in changed])
    return changed
