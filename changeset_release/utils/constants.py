"""Shared constants used across the application."""

import re

# Changelog Aggregation Constants
# -------------------------------

MAJOR_CHANGES_MARKER = "Major Changes"
"""Subheading that changesets emits for major bumps. Classified as a feature."""

MINOR_CHANGES_MARKER = "Minor Changes"
"""Subheading that changesets emits for minor bumps."""

PATCH_CHANGES_MARKER = "Patch Changes"
"""Subheading that changesets emits for patch bumps. Classified as a bug fix."""

FEATURES_HEADING = "## Features"
BUG_FIXES_HEADING = "## Bug fixes"

DEFAULT_CHANGELOG_DIRECTORY = "docs/releases"
"""Directory (relative to the repository root) where aggregated release changelogs are written."""

CHANGELOG_FILE_NAME = "CHANGELOG.md"

# Changesets Workflow Defaults
# ----------------------------

DEFAULT_PR_TITLE = "Version Packages"
DEFAULT_COMMIT_MESSAGE = "Version Packages"
VERSION_BRANCH_PREFIX = "changeset-release/"
CHANGESET_DIRECTORY = ".changeset"
CHANGESETS_CLI_MIN_VERSION_COMMAND = "2.0.0"
"""Changesets CLI releases older than this use the `bump` command instead of `version`."""

NEW_TAG_PATTERN = re.compile(r"New tag:\s+(@[^/]+/[^@]+|[^/]+)@([^\s]+)")
"""Pattern to match a tag announced by `changeset publish` in a monorepo."""

ROOT_NEW_TAG_PATTERN = re.compile(r"New tag:")
"""Pattern to match a tag announced by `changeset publish` in a single-package repository."""

# GitHub Constants
# ----------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_SERVER_URL = "https://github.com"

DEFAULT_MAX_PR_BODY_LENGTH = 60000
"""Default maximum length for pull request bodies, below GitHub's limit of 65536."""

TRUNCATION_SUFFIX = "\n... [truncated - {remaining} characters removed]"
"""Suffix template appended to truncated content. Use .format(remaining=N) to fill in count."""
