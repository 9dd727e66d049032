# Path: packager/models/artifact.py
"""
Artifact Models

What to fetch: upstream repository identifiers and the operator's
version choices.
"""

from dataclasses import dataclass

from packager.constants import (
    UPSTREAM_OWNER,
    EMULATOR_REPO,
    MANAGER_REPO,
    ROMS_REPO,
    VERSION_LATEST,
    TAG_PREFIX,
)


@dataclass(frozen=True)
class ArtifactSpec:
    """
    Identifies one upstream artifact and which release of it to use.

    Attributes:
        owner: Repository owner on the hosting service
        repo: Repository name
        version: 'latest' or an explicit release tag
    """
    owner: str
    repo: str
    version: str = VERSION_LATEST

    @property
    def is_latest(self) -> bool:
        return self.version == VERSION_LATEST

    @property
    def identifier(self) -> str:
        return f"{self.owner}/{self.repo}"


def as_tag(version: str) -> str:
    """Prefix a bare version with 'v' ('4.2' -> 'v4.2'); tags pass through."""
    if version == VERSION_LATEST or version.startswith(TAG_PREFIX):
        return version
    return f"{TAG_PREFIX}{version}"


@dataclass(frozen=True)
class VersionSelection:
    """
    Versions chosen for a run.

    Emulator and ROM versions are bare numbers ('4.2') or 'latest';
    manager versions are used as tags verbatim.
    """
    emulator: str = VERSION_LATEST
    manager: str = VERSION_LATEST
    roms: str = VERSION_LATEST

    @classmethod
    def all_latest(cls) -> 'VersionSelection':
        return cls()

    @classmethod
    def from_answers(cls, emulator: str, manager: str, roms: str) -> 'VersionSelection':
        """
        Build from prompt answers.

        Blank emulator/manager answers mean 'latest'; a blank ROM answer
        reuses the emulator version.
        """
        emulator = emulator.strip() or VERSION_LATEST
        manager = manager.strip() or VERSION_LATEST
        roms = roms.strip() or emulator
        return cls(emulator=emulator, manager=manager, roms=roms)

    def emulator_spec(self) -> ArtifactSpec:
        return ArtifactSpec(UPSTREAM_OWNER, EMULATOR_REPO, as_tag(self.emulator))

    def manager_spec(self) -> ArtifactSpec:
        return ArtifactSpec(UPSTREAM_OWNER, MANAGER_REPO, self.manager)

    def roms_spec(self) -> ArtifactSpec:
        return ArtifactSpec(UPSTREAM_OWNER, ROMS_REPO, as_tag(self.roms))


__all__ = ['ArtifactSpec', 'VersionSelection', 'as_tag']
