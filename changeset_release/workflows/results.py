"""Contains results of the version and publish workflows."""

from pydantic import BaseModel, Field


class PublishedPackage(BaseModel):
    """A package released by the publish workflow."""

    name: str
    version: str


class PublishResult(BaseModel):
    """Result of the publish workflow."""

    published: bool
    published_packages: list[PublishedPackage] = Field(default_factory=list)


class RunVersionResult(BaseModel):
    """Result of the version workflow."""

    pull_request_number: int
    changelog_path: str
    created: bool
