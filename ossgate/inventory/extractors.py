"""
Project-info extractors: one variant per supported build kind.

Both variants produce the inventory the pipeline sends to the compliance
service. Neither parses build-tool files; the multi-module variant consumes a
module list already resolved by the build.
"""
from __future__ import annotations

import fnmatch
import hashlib
import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from pydantic import BaseModel, Field

from ossgate.inventory.types import Coordinates, DependencyInfo, ProjectInfo

logger = logging.getLogger(__name__)

DEFAULT_LIB_INCLUDES = ("**/*.jar",)
POM_PACKAGING = "pom"


class OssInfoExtractor(Protocol):
    def extract(self) -> List[ProjectInfo]:
        ...


class MultiModuleExtractor(OssInfoExtractor, Protocol):
    def top_most_project_name(self) -> str:
        ...


def split_patterns(raw: Optional[str]) -> List[str]:
    """Patterns may be separated by whitespace or commas."""
    return [p for p in re.split(r"[\s,]+", str(raw or "")) if p]


def _sha1_file(path: Path) -> str:
    h = hashlib.sha1()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def _matches_any(rel_path: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatchcase(rel_path, pattern):
            return True
        # "**/" also covers files at the workspace root
        if pattern.startswith("**/") and fnmatch.fnmatchcase(rel_path, pattern[3:]):
            return True
    return False


class GenericOssInfoExtractor:
    """
    Scans the build workspace for library files and fingerprints them by SHA-1.
    """

    def __init__(
        self,
        workspace: str,
        lib_includes: Optional[str] = None,
        lib_excludes: Optional[str] = None,
        project_token: Optional[str] = None,
        project_name: Optional[str] = None,
    ):
        self.workspace = Path(workspace)
        self.includes = split_patterns(lib_includes) or list(DEFAULT_LIB_INCLUDES)
        self.excludes = split_patterns(lib_excludes)
        self.project_token = project_token
        self.project_name = project_name or self.workspace.resolve().name

    def _library_files(self) -> List[Path]:
        found: List[Path] = []
        if not self.workspace.is_dir():
            logger.warning("Workspace %s does not exist", self.workspace)
            return found
        for root, _dirs, files in os.walk(self.workspace):
            for name in files:
                path = Path(root) / name
                rel = path.relative_to(self.workspace).as_posix()
                if _matches_any(rel, self.includes) and not _matches_any(rel, self.excludes):
                    found.append(path)
        return sorted(found, key=lambda p: p.relative_to(self.workspace).as_posix())

    def extract(self) -> List[ProjectInfo]:
        dependencies = []
        for path in self._library_files():
            dependencies.append(
                DependencyInfo(
                    artifact_id=path.name,
                    sha1=_sha1_file(path),
                    system_path=path.as_posix(),
                )
            )
        logger.info("Found %d library files in %s", len(dependencies), self.workspace)
        if not dependencies:
            return []
        return [
            ProjectInfo(
                coordinates=Coordinates(artifact_id=self.project_name),
                project_token=self.project_token,
                dependencies=dependencies,
            )
        ]


class ModuleBuild(BaseModel):
    """One module of a multi-module build, as resolved by the build tool."""

    group_id: Optional[str] = None
    artifact_id: str
    version: Optional[str] = None
    name: Optional[str] = None
    packaging: str = "jar"
    is_root: bool = False
    parent: Optional[Coordinates] = None
    dependencies: List[DependencyInfo] = Field(default_factory=list)

    def coordinates(self) -> Coordinates:
        return Coordinates(group_id=self.group_id, artifact_id=self.artifact_id, version=self.version)


def parse_module_tokens(raw: Optional[str]) -> Dict[str, str]:
    """Lines of `artifactId=token`; malformed lines are skipped."""
    tokens: Dict[str, str] = {}
    for line in str(raw or "").splitlines():
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if key and value:
            tokens[key] = value
    return tokens


class MultiModuleOssInfoExtractor:
    def __init__(
        self,
        modules: Sequence[ModuleBuild],
        modules_to_include: Optional[str] = None,
        modules_to_exclude: Optional[str] = None,
        project_token: Optional[str] = None,
        module_tokens: Optional[str] = None,
        ignore_pom_modules: bool = False,
    ):
        self.modules = list(modules)
        # Module patterns are regexes, separated by whitespace only
        self.includes = [re.compile(p) for p in str(modules_to_include or "").split()]
        self.excludes = [re.compile(p) for p in str(modules_to_exclude or "").split()]
        self.project_token = project_token
        self.module_tokens = parse_module_tokens(module_tokens)
        self.ignore_pom_modules = ignore_pom_modules

    def _root(self) -> Optional[ModuleBuild]:
        for module in self.modules:
            if module.is_root:
                return module
        return self.modules[0] if self.modules else None

    def top_most_project_name(self) -> str:
        root = self._root()
        if root is None:
            return ""
        return root.name or root.artifact_id

    def _selected(self, module: ModuleBuild) -> bool:
        keys = [module.artifact_id, f"{module.group_id or ''}:{module.artifact_id}"]

        def _any(patterns: List[re.Pattern]) -> bool:
            return any(p.fullmatch(k) for p in patterns for k in keys)

        if self.ignore_pom_modules and module.packaging == POM_PACKAGING:
            return False
        if self.includes and not _any(self.includes):
            return False
        return not _any(self.excludes)

    def extract(self) -> List[ProjectInfo]:
        projects: List[ProjectInfo] = []
        for module in self.modules:
            if not self._selected(module):
                logger.debug("Skipping module %s", module.artifact_id)
                continue
            token = self.module_tokens.get(module.artifact_id)
            if token is None and module.is_root:
                token = self.project_token
            projects.append(
                ProjectInfo(
                    coordinates=module.coordinates(),
                    parent_coordinates=module.parent,
                    project_token=token,
                    dependencies=list(module.dependencies),
                )
            )
        return projects
