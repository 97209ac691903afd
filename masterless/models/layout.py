"""
Staging Layout

Remote paths derived from the staging directory.
"""

import posixpath
from dataclasses import dataclass

from masterless.constants import (
    HIERA_CONFIG_FILENAME,
    MANIFESTS_DIR_NAME,
    MODULE_DIR_PREFIX,
)


@dataclass(frozen=True)
class StagingLayout:
    """Remote locations used while staging a run."""

    staging_dir: str

    @property
    def manifests_dir(self) -> str:
        return posixpath.join(self.staging_dir, MANIFESTS_DIR_NAME)

    @property
    def hiera_config_path(self) -> str:
        return posixpath.join(self.staging_dir, HIERA_CONFIG_FILENAME)

    def module_dir(self, index: int) -> str:
        """Remote directory for the module path at the given position."""
        return posixpath.join(self.staging_dir, f"{MODULE_DIR_PREFIX}{index}")

    def manifest_file(self, basename: str) -> str:
        """Remote location of a single uploaded manifest."""
        return posixpath.join(self.manifests_dir, basename)
