"""Package resolvers: which package a source file belongs to.

Every global symbol starts with a package header
``"<scheme> <manager> <name> <version> "`` followed by the file's own Package
descriptor (its path inside the package).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from symdex.core.logging import get_logger
from symdex.index.descriptor import package_descriptor
from symdex.index.tree import PackageRef

log = get_logger("index.packages")

DEFAULT_VERSION = "HEAD"


def _header_part(value: str) -> str:
    # Spaces inside a header segment are escaped by doubling
    return value.replace(" ", "  ")


def package_header(scheme: str, manager: str, name: str, version: str) -> str:
    """Render the header shared by every global symbol of one package."""
    parts = (scheme, manager, name, version or DEFAULT_VERSION)
    return " ".join(_header_part(p) for p in parts) + " "


class StaticPackageResolver:
    """Package identities known up front, keyed by file path."""

    def __init__(self, packages: Mapping[str, PackageRef] | None = None) -> None:
        self._packages: dict[str, PackageRef] = dict(packages or {})

    def add(self, file_path: str, header: str, descriptor_path: str | None = None) -> PackageRef:
        ref = PackageRef(header, package_descriptor(descriptor_path or file_path))
        self._packages[file_path] = ref
        return ref

    def package_of(self, file_path: str) -> PackageRef | None:
        return self._packages.get(file_path)


class NpmPackageResolver:
    """Resolves files to the nearest enclosing ``package.json``.

    The package descriptor of a file is its POSIX path relative to the
    directory holding that ``package.json``. Manifests without a ``name`` are
    skipped; files with no named manifest up to the project root are not
    indexable (None).

    Usage::

        packages = NpmPackageResolver(Path("/repo"), scheme="scip-typescript", manager="npm")
        ref = packages.package_of("packages/core/src/index.ts")
        ref.header  # "scip-typescript npm @acme/core 1.2.0 "
    """

    def __init__(self, project_root: Path, *, scheme: str, manager: str) -> None:
        self.project_root = project_root.resolve()
        self.scheme = scheme
        self.manager = manager
        self._manifests: dict[Path, tuple[str, str] | None] = {}

    def package_of(self, file_path: str) -> PackageRef | None:
        path = Path(file_path)
        if not path.is_absolute():
            path = self.project_root / path
        path = path.resolve()

        for directory in path.parents:
            if not directory.is_relative_to(self.project_root):
                break
            manifest = self._manifest(directory)
            if manifest is not None:
                name, version = manifest
                relative = PurePosixPath(path.relative_to(directory).as_posix())
                return PackageRef(
                    package_header(self.scheme, self.manager, name, version),
                    package_descriptor(str(relative)),
                )
        return None

    def _manifest(self, directory: Path) -> tuple[str, str] | None:
        if directory in self._manifests:
            return self._manifests[directory]

        manifest: tuple[str, str] | None = None
        package_json = directory / "package.json"
        if package_json.is_file():
            try:
                data = json.loads(package_json.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                log.warning("package_json_unreadable", path=str(package_json), error=str(e))
                data = {}
            name = data.get("name") if isinstance(data, dict) else None
            if isinstance(name, str) and name:
                version = data.get("version")
                if not isinstance(version, str) or not version:
                    version = DEFAULT_VERSION
                manifest = (name, version)
        self._manifests[directory] = manifest
        return manifest
