"""Contains exceptions raised while reading changesets, packages and changelogs."""


class ChangelogEntryNotFoundError(Exception):
    """Raised when a package's changelog has no entry for its current version."""

    def __init__(self, package_name: str, version: str) -> None:
        """Initializes the exception with the package and version that were looked up."""
        super().__init__(f"Could not find changelog entry for {package_name}@{version}")
        self.package_name = package_name
        self.version = version


class PackageNotFoundError(Exception):
    """Raised when publish output names a package that is not part of the workspace."""

    pass


class ChangesetsCliNotFoundError(Exception):
    """Raised when @changesets/cli is not installed in the repository."""

    pass


class WorkspaceConfigurationError(Exception):
    """Raised when the repository's package.json or workspace configuration cannot be read."""

    pass
