"""Must-gather archive extraction.

This module unpacks a gzip tar stream into an extraction root. Only
entries under a ``namespaces/`` or ``cluster-scoped-resources/`` tree
are materialized, the producer-specific path prefix in front of those
trees is stripped, and colliding files are written under versioned
names so extracted data is never overwritten.
"""

from __future__ import annotations

import shutil
import tarfile
import zlib
from pathlib import Path, PurePosixPath

from core.constants import ROOT_MARKER_SEGMENTS
from core.errors import LogsViewerExtractionError
from core.logging_config import get_logger
from core.types import ExtractionResult
from extract.collision_naming import resolve_free_path

_LOGGER = get_logger(__name__)
_ROOT_MARKERS = tuple(f"{segment}/" for segment in ROOT_MARKER_SEGMENTS)


class ArchiveExtractionPass:
    """Stateful single-archive extraction run.

    The namespace root is detected from the first qualifying entry that
    has a whole ``namespaces`` or ``cluster-scoped-resources`` segment and
    reused for every later entry of the same archive. Entries seen before
    that keep their full relative path.
    """

    def __init__(self, archive_path: Path, target_dir: Path) -> None:
        self._archive_path = archive_path
        self._target_dir = target_dir
        self._resolved_target = target_dir.resolve()
        self._namespace_root: tuple[str, ...] | None = None
        self._written_files: list[Path] = []
        self._created_dirs: list[Path] = []
        self._renamed_files: list[Path] = []

    def run(self, remove_source: bool) -> ExtractionResult:
        """Extract every qualifying entry, then delete the source archive.

        Args:
            remove_source: Delete the archive after a successful pass.

        Returns:
            Extraction summary.

        Raises:
            LogsViewerExtractionError: If the stream, an entry, or a write fails.
        """
        try:
            self._target_dir.mkdir(parents=True, exist_ok=True)
            with tarfile.open(self._archive_path, mode="r|gz") as archive:
                for member in archive:
                    self._extract_member(archive, member)
        except (OSError, EOFError, tarfile.TarError, zlib.error) as error:
            raise LogsViewerExtractionError(
                f"Failed to read archive {self._archive_path}: {error}. "
                "Provide a readable gzip-compressed tar must-gather bundle."
            ) from error
        _LOGGER.info(
            "archive_extracted",
            archive_path=str(self._archive_path),
            target_dir=str(self._target_dir),
            namespace_root="/".join(self._namespace_root or ()),
            file_count=len(self._written_files),
            renamed_count=len(self._renamed_files),
        )
        source_removed = _remove_source(self._archive_path) if remove_source else False
        return ExtractionResult(
            archive_path=self._archive_path,
            target_dir=self._target_dir,
            namespace_root=self._namespace_root or (),
            written_files=tuple(self._written_files),
            created_dirs=tuple(self._created_dirs),
            renamed_files=tuple(self._renamed_files),
            source_removed=source_removed,
        )

    def _extract_member(self, archive: tarfile.TarFile, member: tarfile.TarInfo) -> None:
        entry_name = _entry_name(member)
        if not any(marker in entry_name for marker in _ROOT_MARKERS):
            return
        segments = tuple(entry_name.split("/"))
        if self._namespace_root is None and _has_marker_segment(segments):
            self._namespace_root = detect_namespace_root(segments)
            _LOGGER.debug(
                "namespace_root_detected",
                entry_name=member.name,
                namespace_root="/".join(self._namespace_root),
            )
        destination = self._destination_for(member.name, segments)
        if member.isdir():
            self._create_directory(destination)
        elif member.isreg():
            self._write_file(archive, member, destination)
        else:
            raise LogsViewerExtractionError(
                f"Unsupported tar entry type {member.type!r} for {member.name} "
                f"in {self._archive_path}. Only directories and regular files "
                "can be extracted from a must-gather bundle."
            )

    def _destination_for(self, entry_name: str, segments: tuple[str, ...]) -> Path:
        root = self._namespace_root or ()
        if segments[: len(root)] == root:
            segments = segments[len(root) :]
        relative_segments = [segment for segment in segments if segment not in ("", ".")]
        if ".." in relative_segments:
            raise LogsViewerExtractionError(
                f"Archive entry {entry_name} escapes the extraction root "
                f"{self._target_dir}. Refusing to extract a path with '..' segments."
            )
        destination = self._target_dir.joinpath(*relative_segments)
        if not destination.resolve().is_relative_to(self._resolved_target):
            raise LogsViewerExtractionError(
                f"Archive entry {entry_name} resolves outside the extraction root "
                f"{self._target_dir}."
            )
        return destination

    def _create_directory(self, destination: Path) -> None:
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise LogsViewerExtractionError(
                f"Failed to create directory {destination}: {error}. "
                "Check write permissions on the extraction root."
            ) from error
        self._created_dirs.append(destination)

    def _write_file(
        self,
        archive: tarfile.TarFile,
        member: tarfile.TarInfo,
        destination: Path,
    ) -> None:
        if destination == self._target_dir:
            raise LogsViewerExtractionError(
                f"Archive entry {member.name} maps onto the extraction root itself."
            )
        payload = archive.extractfile(member)
        if payload is None:
            raise LogsViewerExtractionError(
                f"Failed to read payload of {member.name} from {self._archive_path}."
            )
        free_destination = resolve_free_path(destination)
        try:
            free_destination.parent.mkdir(parents=True, exist_ok=True)
            with free_destination.open("xb") as output_file:
                shutil.copyfileobj(payload, output_file)
        except OSError as error:
            raise LogsViewerExtractionError(
                f"Failed to write {free_destination} from entry {member.name}: {error}. "
                "Check write permissions and available disk space."
            ) from error
        if free_destination != destination:
            self._renamed_files.append(free_destination)
            _LOGGER.info(
                "entry_renamed",
                entry_name=member.name,
                destination=str(destination),
                renamed_to=str(free_destination),
            )
        self._written_files.append(free_destination)


def extract_archive(
    archive_path: str | Path,
    target_dir: str | Path,
    remove_source: bool = True,
) -> ExtractionResult:
    """Extract a must-gather archive into a target directory.

    Args:
        archive_path: Gzip-compressed tar file.
        target_dir: Extraction root; created when missing.
        remove_source: Delete the archive after a successful extraction.

    Returns:
        Extraction summary.

    Raises:
        LogsViewerExtractionError: If the archive cannot be read or an entry
            cannot be materialized. Files written before the failure remain.
    """
    extraction = ArchiveExtractionPass(
        Path(archive_path).expanduser(), Path(target_dir).expanduser()
    )
    return extraction.run(remove_source)


def detect_namespace_root(segments: tuple[str, ...]) -> tuple[str, ...]:
    """Collect path segments preceding the first root marker segment.

    Args:
        segments: Entry name split on ``/``.

    Returns:
        Segments up to, excluding, the first ``namespaces`` or
        ``cluster-scoped-resources`` segment.
    """
    root: list[str] = []
    for segment in segments:
        if segment in ROOT_MARKER_SEGMENTS:
            break
        root.append(segment)
    return tuple(root)


def _has_marker_segment(segments: tuple[str, ...]) -> bool:
    """Tell whether a marker is a whole segment, not part of a longer name."""
    return any(segment in ROOT_MARKER_SEGMENTS for segment in segments)


def _entry_name(member: tarfile.TarInfo) -> str:
    """Return the entry name with the trailing slash tarfile strips from dirs."""
    name = PurePosixPath(member.name).as_posix() if member.name else ""
    if member.isdir() and not name.endswith("/"):
        return f"{name}/"
    return name


def _remove_source(archive_path: Path) -> bool:
    """Delete the extracted archive; failures are reported, not raised."""
    try:
        archive_path.unlink()
    except OSError as error:
        _LOGGER.warning(
            "archive_remove_failed",
            archive_path=str(archive_path),
            error=str(error),
        )
        return False
    _LOGGER.info("archive_removed", archive_path=str(archive_path))
    return True
