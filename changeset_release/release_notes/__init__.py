"""Aggregated release changelog generation."""

from .assembler import assemble_document, build_release_changelog, render_document, write_release_changelog
from .classifier import classify_entries, classify_entry
from .models import AggregatedDocument, ChangelogEntry, ClassifiedChange
from .renderer import render_bucket, strip_section_marker
from .titles import format_package_title

__all__ = [
    "AggregatedDocument",
    "ChangelogEntry",
    "ClassifiedChange",
    "assemble_document",
    "build_release_changelog",
    "classify_entries",
    "classify_entry",
    "format_package_title",
    "render_bucket",
    "render_document",
    "strip_section_marker",
    "write_release_changelog",
]
