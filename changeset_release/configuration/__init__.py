"""Configuration for the changeset release CLI."""
