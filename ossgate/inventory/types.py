from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Models serialized to the service in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(_WireModel):
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None


class DependencyInfo(_WireModel):
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    type: Optional[str] = None
    classifier: Optional[str] = None
    scope: Optional[str] = None
    sha1: Optional[str] = None
    system_path: Optional[str] = None
    optional: bool = False
    children: List["DependencyInfo"] = Field(default_factory=list)


class ProjectInfo(_WireModel):
    """Open source usage of one project (module) of the build."""

    coordinates: Coordinates = Field(default_factory=Coordinates)
    parent_coordinates: Optional[Coordinates] = None
    project_token: Optional[str] = None
    dependencies: List[DependencyInfo] = Field(default_factory=list)


ProjectInventory = List[ProjectInfo]
