"""Type descriptor providers: where the analyzer gets its input from."""

from __future__ import annotations

import logging
import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union

from . import config
from .classfile import parse_class
from .errors import ArtifactAccessError, UnresolvableDescriptorError
from .models import TypeDescriptor

logger = logging.getLogger(__name__)


class DescriptorProvider(ABC):
    """Abstract source of type descriptors."""

    @abstractmethod
    def load_descriptors(self, artifact_path: Union[str, Path]) -> List[TypeDescriptor]:
        """Return every type descriptor found in *artifact_path*."""
        ...


class JarDescriptorProvider(DescriptorProvider):
    """Reads ``.class`` entries from a Java archive.

    Entries that cannot be decoded are skipped; partial results are fine.
    """

    def load_descriptors(self, artifact_path: Union[str, Path]) -> List[TypeDescriptor]:
        path = Path(artifact_path)
        if not path.is_file():
            raise ArtifactAccessError(str(path), "no such file")

        descriptors: List[TypeDescriptor] = []
        skipped = 0
        try:
            with zipfile.ZipFile(path) as archive:
                for entry in archive.infolist():
                    if not self._is_type_entry(entry):
                        continue
                    # A damaged or unreadable entry only spoils itself.
                    try:
                        descriptors.append(parse_class(archive.read(entry)))
                    except (
                        UnresolvableDescriptorError,
                        zipfile.BadZipFile,
                        zlib.error,
                        NotImplementedError,
                        RuntimeError,
                    ) as exc:
                        skipped += 1
                        logger.debug("Skipping %s: %s", entry.filename, exc)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArtifactAccessError(str(path), str(exc)) from exc

        logger.info("Loaded %d types from %s (%d skipped)", len(descriptors), path, skipped)
        return descriptors

    @staticmethod
    def _is_type_entry(entry: zipfile.ZipInfo) -> bool:
        if entry.is_dir() or not entry.filename.endswith(config.CLASS_SUFFIX):
            return False
        return entry.filename.rsplit("/", 1)[-1] not in config.SKIP_ENTRIES


def load_descriptors(artifact_path: Union[str, Path]) -> List[TypeDescriptor]:
    return JarDescriptorProvider().load_descriptors(artifact_path)
