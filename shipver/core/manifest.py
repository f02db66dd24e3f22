"""Project manifest version reader/writer.

Supports Maven (``pom.xml``) and Node.js (``package.json``) projects.

Only the project's own version field is read or rewritten, and writes are
textual so comments, ordering, indentation and line endings survive:

- Maven: the ``<version>`` element that is a direct child of ``<project>``.
  A ``${property}`` reference is resolved through ``<properties>``; when the
  project has no version of its own, the ``<parent>`` version is read.
- Node: the top-level ``"version"`` key. A ``package-lock.json`` or
  ``npm-shrinkwrap.json`` next to it gets its root version updated too.
"""

from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from shipver.constants import (
    MANIFEST_FILES,
    NODE_LOCKFILES,
    PROJECT_MAVEN,
    PROJECT_NODE,
)
from shipver.exceptions import ManifestError
from shipver.utils.filesystem import PathLike, safe_read_file, safe_write_file
from shipver.utils.logger import get_logger

logger = get_logger("core.manifest")

Span = Tuple[int, int]

_COMMENT_RE = re.compile(r"<!--.*?-->|<!\[CDATA\[.*?\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<(/?)([A-Za-z_][\w:.-]*)(?:\s[^>]*?)?(/?)>")
_PROPERTY_RE = re.compile(r"^\$\{([^}]+)\}$")


def manifest_path(directory: PathLike, project_type: str) -> Path:
    """Return the manifest path for a project type.

    Raises:
        ManifestError: Unsupported project type.
    """
    try:
        filename = MANIFEST_FILES[project_type]
    except KeyError:
        raise ManifestError(
            f"Unsupported project type {project_type!r}; "
            f"expected one of {', '.join(MANIFEST_FILES)}",
            project_type=project_type,
        ) from None
    return Path(directory) / filename


def detect_project_type(directory: PathLike) -> str:
    """Detect the project type from the manifest present in ``directory``.

    ``pom.xml`` takes precedence over ``package.json``.

    Raises:
        ManifestError: No supported manifest found.
    """
    root = Path(directory)
    for project_type, filename in MANIFEST_FILES.items():
        if (root / filename).is_file():
            logger.debug("Detected %s project (%s)", project_type, filename)
            return project_type

    raise ManifestError(
        f"No supported manifest ({', '.join(MANIFEST_FILES.values())}) "
        f"found in {root}",
        file_path=str(root),
    )


def read_version(directory: PathLike, project_type: str) -> str:
    """Read the current project version.

    For Maven, a ``${name}`` version is resolved from the POM's own
    ``<properties>``, and a project without a ``<version>`` reports the
    ``<parent>`` version it inherits. Properties defined in a parent POM or
    passed on the command line are not resolved.

    Raises:
        ManifestError: Manifest missing, malformed, or without a version.
    """
    path = _existing_manifest(directory, project_type)

    text = safe_read_file(path)
    if project_type == PROJECT_MAVEN:
        version = _read_maven_version(text, path)
    else:
        version = _read_node_version(text, path)

    logger.info("Current %s version: %s", project_type, version)
    return version


def write_version(directory: PathLike, project_type: str, new_version: str) -> Path:
    """Rewrite the project version in place.

    Returns:
        Path of the rewritten manifest.

    Raises:
        ManifestError: Manifest missing, malformed, or without a version of
            its own (Maven projects inheriting the parent version).
    """
    path = _existing_manifest(directory, project_type)

    text = safe_read_file(path)
    if project_type == PROJECT_MAVEN:
        updated = _replace_maven_version(text, new_version, path)
    else:
        updated = _replace_node_version(text, new_version, path)

    safe_write_file(path, updated)
    logger.info("Updated %s to version %s", path.name, new_version)

    if project_type == PROJECT_NODE:
        _update_lockfiles(path.parent, new_version)
    return path


def _existing_manifest(directory: PathLike, project_type: str) -> Path:
    path = manifest_path(directory, project_type)
    if not path.is_file():
        raise ManifestError(
            f"Manifest not found: {path}",
            file_path=str(path),
            project_type=project_type,
        )
    return path


# ---------------------------------------------------------------------------
# Maven
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].rsplit(":", 1)[-1]


def _maven_error(message: str, path: Path) -> ManifestError:
    return ManifestError(message, file_path=str(path), project_type=PROJECT_MAVEN)


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return child
    return None


def _child_text(element: Optional[ET.Element], name: str) -> Optional[str]:
    if element is None:
        return None
    child = _child(element, name)
    if child is None:
        return None
    return (child.text or "").strip() or None


def _parse_pom(text: str, path: Path) -> ET.Element:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise _maven_error(f"Invalid XML in {path.name}: {exc}", path) from exc

    if _local_name(root.tag) != "project":
        raise _maven_error(f"{path.name} has no <project> root element", path)
    return root


def _property_name(value: str) -> Optional[str]:
    match = _PROPERTY_RE.match(value)
    return match.group(1) if match else None


def _read_maven_version(text: str, path: Path) -> str:
    root = _parse_pom(text, path)

    version = _child_text(root, "version")
    if version is None:
        version = _child_text(_child(root, "parent"), "version")
        if version is None:
            raise _maven_error(f"No project or parent <version> in {path.name}", path)
        logger.debug("%s inherits its version from <parent>", path.name)

    prop = _property_name(version)
    if prop is not None:
        value = _child_text(_child(root, "properties"), prop)
        if value is None:
            raise _maven_error(
                f"Version {version} refers to a property not defined in {path.name}",
                path,
            )
        logger.debug("Resolved %s to %s", version, value)
        version = value

    return version


def _blank(match: "re.Match[str]") -> str:
    """Replace a match with spaces of the same length, keeping offsets."""
    return re.sub(r"[^\n]", " ", match.group(0))


def _element_span(text: str, path: Sequence[str]) -> Optional[Span]:
    """Return the span of the trimmed text of ``<project>/path``.

    ``path`` lists local element names below the root, e.g.
    ``("properties", "revision")``. Only direct children at each level
    match, so versions of dependencies, plugins or relocations are never
    found by mistake.
    """
    masked = _COMMENT_RE.sub(_blank, text)
    stack: List[str] = []

    for match in _TAG_RE.finditer(masked):
        closing, name, self_closing = match.groups()
        if closing:
            if stack:
                stack.pop()
            continue
        if self_closing:
            continue

        local = name.rsplit(":", 1)[-1]
        at_parent = len(stack) == len(path) and tuple(stack[1:]) == tuple(path[:-1])
        if at_parent and local == path[-1]:
            close = re.compile(rf"</{re.escape(name)}\s*>").search(masked, match.end())
            if close is None:
                return None
            start, end = match.end(), close.start()
            value = text[start:end]
            return start + len(value) - len(value.lstrip()), start + len(value.rstrip())

        stack.append(local)

    return None


def _replace_maven_version(text: str, new_version: str, path: Path) -> str:
    # Validates the document before rewriting it
    root = _parse_pom(text, path)
    if _child_text(root, "version") is None:
        raise _maven_error(
            f"{path.name} inherits its version from <parent>; "
            "set the version in the parent project",
            path,
        )

    span = _element_span(text, ("version",))
    if span is None:
        raise _maven_error(f"No project <version> in {path.name}", path)

    prop = _property_name(text[span[0]:span[1]])
    if prop is not None:
        span = _element_span(text, ("properties", prop))
        if span is None:
            raise _maven_error(
                f"Property {prop} is not defined in {path.name}",
                path,
            )

    start, end = span
    return text[:start] + new_version + text[end:]


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

_JSON_WS = " \t\r\n"
_decoder = json.JSONDecoder()


def _skip_ws(text: str, index: int) -> int:
    while index < len(text) and text[index] in _JSON_WS:
        index += 1
    return index


def _members(text: str, start: int) -> Iterator[Tuple[str, int, int]]:
    """Yield ``(key, value_start, value_end)`` for the object at ``start``."""
    index = _skip_ws(text, start + 1)
    if text[index] == "}":
        return
    while True:
        key, index = _decoder.raw_decode(text, index)
        index = _skip_ws(text, _skip_ws(text, index) + 1)
        _, end = _decoder.raw_decode(text, index)
        yield key, index, end
        index = _skip_ws(text, end)
        if text[index] != ",":
            return
        index = _skip_ws(text, index + 1)


def _json_value_span(text: str, path: Sequence[str]) -> Optional[Span]:
    """Return the span of the value at ``path`` in a valid JSON document.

    Duplicate keys resolve to the last occurrence, as ``json.loads`` does.
    """
    index = _skip_ws(text, 0)
    span: Optional[Span] = None
    for key in path:
        if index >= len(text) or text[index] != "{":
            return None
        span = None
        for name, start, end in _members(text, index):
            if name == key:
                span = (start, end)
        if span is None:
            return None
        index = span[0]
    return span


def _load_package_json(text: str, path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(
            f"Invalid JSON in {path.name}: {exc}",
            file_path=str(path),
            project_type=PROJECT_NODE,
        ) from exc

    if not isinstance(data, dict):
        raise ManifestError(
            f"{path.name} must contain a JSON object",
            file_path=str(path),
            project_type=PROJECT_NODE,
        )
    return data


def _read_node_version(text: str, path: Path) -> str:
    data = _load_package_json(text, path)
    version = data.get("version")
    if not isinstance(version, str) or not version.strip():
        raise ManifestError(
            f"No \"version\" field in {path.name}",
            file_path=str(path),
            project_type=PROJECT_NODE,
        )
    return version.strip()


def _replace_json_string(text: str, path: Sequence[str], value: str) -> Optional[str]:
    span = _json_value_span(text, path)
    if span is None or text[span[0]] != '"':
        return None
    start, end = span
    return text[:start] + json.dumps(value, ensure_ascii=False) + text[end:]


def _replace_node_version(text: str, new_version: str, path: Path) -> str:
    _read_node_version(text, path)
    updated = _replace_json_string(text, ("version",), new_version)
    if updated is None:
        raise ManifestError(
            f"No \"version\" field in {path.name}",
            file_path=str(path),
            project_type=PROJECT_NODE,
        )
    return updated


def _update_lockfiles(directory: Path, new_version: str) -> None:
    """Set the root package version in npm lockfiles, if present."""
    for filename in NODE_LOCKFILES:
        lockfile = directory / filename
        if not lockfile.is_file():
            continue

        text = safe_read_file(lockfile)
        _load_package_json(text, lockfile)

        updated = text
        for key_path in (("version",), ("packages", "", "version")):
            replaced = _replace_json_string(updated, key_path, new_version)
            if replaced is not None:
                updated = replaced

        if updated != text:
            safe_write_file(lockfile, updated)
            logger.info("Updated %s to version %s", filename, new_version)
