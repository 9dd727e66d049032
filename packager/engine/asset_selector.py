# Path: packager/engine/asset_selector.py
"""
Asset Selector

Chooses what to download from a resolved release.

- Emulator: asset whose name fully matches the per-architecture pattern
- Manager: first asset of the release
- ROMs: not a release asset; source archive URL derived from the tag
"""

import platform
import re
from typing import Optional

from packager.core.logger import get_logger
from packager.core.config_loader import ConfigLoader
from packager.engine.errors import AssetNotFound, UnsupportedArchitecture
from packager.models import AssetRef, ReleaseDescriptor
from packager.constants import (
    UPSTREAM_OWNER,
    ROMS_REPO,
    LOG_PROCESS,
)
from packager.engine.constants import (
    EMULATOR_ASSET_PATTERNS,
    MACHINE_ARCH_MAP,
    ROMS_ARCHIVE_URL_TEMPLATE,
)

logger = get_logger(__name__, 'engine')


def detect_architecture(
    machine: Optional[str] = None,
    config: Optional[ConfigLoader] = None
) -> str:
    """
    Map the host (or an explicit machine name) to '32' or '64'.

    PACKAGER_ARCH overrides detection when no machine is passed.

    Raises:
        UnsupportedArchitecture: For anything other than x86 / x86-64
    """
    if machine is None:
        config = config if config else ConfigLoader()
        machine = config.get('arch') or platform.machine()

    normalized = machine.strip().lower()
    if normalized in EMULATOR_ASSET_PATTERNS:
        return normalized

    arch = MACHINE_ARCH_MAP.get(normalized)
    if arch is None:
        raise UnsupportedArchitecture(machine)

    logger.debug(f"{LOG_PROCESS} Architecture: {machine} -> {arch}bit")
    return arch


def select_emulator_asset(release: ReleaseDescriptor, arch: str) -> AssetRef:
    """
    Raises:
        UnsupportedArchitecture: If arch has no pattern
        AssetNotFound: If no asset name matches the pattern
    """
    pattern = EMULATOR_ASSET_PATTERNS.get(arch)
    if pattern is None:
        raise UnsupportedArchitecture(arch)

    regex = re.compile(pattern)
    for asset in release.assets:
        if regex.fullmatch(asset.name):
            logger.info(f"{LOG_PROCESS} Emulator asset: {asset.name}")
            return asset

    raise AssetNotFound(release.tag, pattern)


def select_manager_asset(release: ReleaseDescriptor) -> AssetRef:
    """The manager publishes a single asset per release."""
    if not release.assets:
        raise AssetNotFound(release.tag, '<any>')

    asset = release.assets[0]
    logger.info(f"{LOG_PROCESS} Manager asset: {asset.name}")
    return asset


def roms_archive_asset(
    tag: str,
    web_base_url: str,
    owner: str = UPSTREAM_OWNER,
    repo: str = ROMS_REPO
) -> AssetRef:
    """Source archive of the ROM repository at a tag."""
    url = ROMS_ARCHIVE_URL_TEMPLATE.format(
        web_base=web_base_url.rstrip('/'),
        owner=owner,
        repo=repo,
        tag=tag,
    )
    return AssetRef(name=f"{tag}.zip", download_url=url)


__all__ = [
    'detect_architecture',
    'select_emulator_asset',
    'select_manager_asset',
    'roms_archive_asset',
]
