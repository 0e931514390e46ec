"""Repository listing data model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryEntry:
    """
    A repository as listed by a repository source.

    Attributes:
        name: Repository name, also used as the local directory name
        clone_url: Address passed to ``git clone``; empty when the source
            could only produce a display name
    """

    name: str
    clone_url: str = ""

    @property
    def has_clone_url(self) -> bool:
        return bool(self.clone_url)

    def __str__(self) -> str:
        return self.name
