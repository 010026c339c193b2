"""YAML manifest decoding into typed resource records.

Three physical encodings are supported: a single manifest document,
a multi-document stream, and a single ``List`` document wrapping an
``items`` sequence.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

import yaml

from core.constants import LIST_ITEMS_FIELD, LIST_KIND
from core.errors import LogsViewerDecodeError
from core.types import PodRecord, ResourceKind, ResourceRecord


def decode_manifest(kind: ResourceKind, data: bytes, source_path: str) -> ResourceRecord:
    """Decode one single-document manifest file.

    Args:
        kind: Expected resource kind.
        data: Raw YAML bytes.
        source_path: File path for error context.

    Returns:
        Typed record.

    Raises:
        LogsViewerDecodeError: If bytes are not a manifest of ``kind``.
    """
    document = _safe_load(data, source_path)
    if document is None:
        raise LogsViewerDecodeError(
            f"Manifest {source_path} is empty; expected a {kind} document."
        )
    return build_record(kind, document, source_path)


def iter_manifest_stream(
    kind: ResourceKind,
    data: bytes,
    source_path: str,
) -> Iterator[ResourceRecord]:
    """Lazily decode a multi-document YAML stream.

    The generator is single-pass over one buffer; empty documents are
    skipped and the first malformed document ends it with an error.

    Args:
        kind: Expected resource kind of every document.
        data: Raw YAML stream bytes.
        source_path: File path for error context.

    Yields:
        One record per non-empty document.

    Raises:
        LogsViewerDecodeError: If a document cannot be parsed or validated.
    """
    documents = yaml.safe_load_all(data)
    document_index = 0
    while True:
        try:
            document = next(documents)
        except StopIteration:
            return
        except yaml.YAMLError as error:
            raise LogsViewerDecodeError(
                f"Failed to parse document {document_index} of {source_path}: {error}."
            ) from error
        document_source = f"{source_path}#{document_index}"
        document_index += 1
        if document is None:
            continue
        yield build_record(kind, document, document_source)


def decode_manifest_list(
    kind: ResourceKind,
    data: bytes,
    source_path: str,
) -> list[ResourceRecord]:
    """Decode a ``List`` document and return its items as records.

    Args:
        kind: Expected resource kind of the items.
        data: Raw YAML bytes.
        source_path: File path for error context.

    Returns:
        Records in ``items`` order; empty when ``items`` is missing.

    Raises:
        LogsViewerDecodeError: If the document is not a list of ``kind``.
    """
    document = _safe_load(data, source_path)
    list_mapping = _expect_mapping(document, source_path, f"{kind}List document")
    list_kind = list_mapping.get("kind")
    if list_kind is not None and list_kind not in (LIST_KIND, f"{kind}{LIST_KIND}"):
        raise LogsViewerDecodeError(
            f"Manifest {source_path} has kind '{list_kind}'; "
            f"expected '{LIST_KIND}' or '{kind}{LIST_KIND}'."
        )
    items = list_mapping.get(LIST_ITEMS_FIELD)
    if items is None:
        return []
    if not isinstance(items, list):
        raise LogsViewerDecodeError(
            f"Manifest {source_path} field '{LIST_ITEMS_FIELD}' must be a sequence, "
            f"got {type(items).__name__}."
        )
    return [
        build_record(kind, item, f"{source_path}#{index}")
        for index, item in enumerate(items)
    ]


def build_record(kind: ResourceKind, document: object, source_path: str) -> ResourceRecord:
    """Validate a decoded document and wrap it in a typed record.

    Args:
        kind: Expected resource kind.
        document: Decoded YAML value.
        source_path: Origin for error context and provenance.

    Returns:
        ``PodRecord`` for pods, ``ResourceRecord`` for other kinds.

    Raises:
        LogsViewerDecodeError: If the document does not match the kind schema.
    """
    manifest = _expect_mapping(document, source_path, f"{kind} manifest")
    document_kind = manifest.get("kind")
    if document_kind is not None and document_kind != kind:
        raise LogsViewerDecodeError(
            f"Manifest {source_path} has kind '{document_kind}'; expected '{kind}'."
        )
    metadata = _optional_mapping(manifest, "metadata", source_path)
    if kind != "Pod":
        return ResourceRecord(kind=kind, manifest=manifest, source_path=source_path)
    spec = _optional_mapping(manifest, "spec", source_path)
    status = _optional_mapping(manifest, "status", source_path)
    _optional_string(metadata, "uid", source_path)
    return PodRecord(
        kind=kind,
        manifest=manifest,
        source_path=source_path,
        node_name=_optional_string(spec, "nodeName", source_path),
        host_ip=_optional_string(status, "hostIP", source_path),
        owner_uids=_owner_uids(metadata, source_path),
    )


def _safe_load(data: bytes, source_path: str) -> object:
    try:
        return yaml.safe_load(data)
    except yaml.YAMLError as error:
        raise LogsViewerDecodeError(f"Failed to parse YAML in {source_path}: {error}.") from error


def _expect_mapping(value: object, source_path: str, context: str) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise LogsViewerDecodeError(
            f"Invalid {context} in {source_path}: expected a mapping, "
            f"got {type(value).__name__}."
        )
    return dict(value)


def _optional_mapping(
    manifest: Mapping[str, Any],
    field_name: str,
    source_path: str,
) -> Mapping[str, Any]:
    value = manifest.get(field_name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise LogsViewerDecodeError(
            f"Invalid '{field_name}' in {source_path}: expected a mapping, "
            f"got {type(value).__name__}."
        )
    return value


def _optional_string(mapping: Mapping[str, Any], field_name: str, source_path: str) -> str:
    value = mapping.get(field_name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise LogsViewerDecodeError(
            f"Invalid '{field_name}' in {source_path}: expected a string, "
            f"got {type(value).__name__}."
        )
    return value


def _owner_uids(metadata: Mapping[str, Any], source_path: str) -> tuple[str, ...]:
    references = metadata.get("ownerReferences")
    if references is None:
        return ()
    if not isinstance(references, list):
        raise LogsViewerDecodeError(
            f"Invalid 'ownerReferences' in {source_path}: expected a sequence."
        )
    owner_uids: list[str] = []
    for reference in references:
        if not isinstance(reference, Mapping):
            raise LogsViewerDecodeError(
                f"Invalid owner reference in {source_path}: expected a mapping."
            )
        owner_uids.append(_optional_string(reference, "uid", source_path))
    return tuple(owner_uids)
