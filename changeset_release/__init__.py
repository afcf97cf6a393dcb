"""Automates changeset-based versioning and publishing for JavaScript monorepos."""
