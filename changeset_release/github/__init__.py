"""GitHub REST access for the release workflows."""
