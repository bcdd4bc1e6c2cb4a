from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

REJECT_ACTION = "Reject"
STATUS_SUCCESS = 1


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ResultEnvelope(_WireModel):
    """Outer envelope of every service response; `data` holds the JSON payload."""

    envelope_version: Optional[str] = None
    status: int = 0
    message: str = ""
    data: Optional[str] = None


class PolicyInfo(_WireModel):
    id: Optional[int] = None
    display_name: str = ""
    filter_type: Optional[str] = None
    action_type: str = ""

    @property
    def is_reject(self) -> bool:
        return self.action_type == REJECT_ACTION


class ResourceInfo(_WireModel):
    display_name: str = ""
    link: Optional[str] = None
    licenses: List[str] = Field(default_factory=list)


class PolicyCheckResourceNode(_WireModel):
    resource: ResourceInfo = Field(default_factory=ResourceInfo)
    policy: Optional[PolicyInfo] = None
    children: List["PolicyCheckResourceNode"] = Field(default_factory=list)

    def walk(self) -> Iterator["PolicyCheckResourceNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def has_rejections(self) -> bool:
        return any(node.policy is not None and node.policy.is_reject for node in self.walk())


class RejectedEntry(BaseModel):
    project: str
    resource: str
    policy: str


class ComplianceVerdict(_WireModel):
    """
    Result of a policy check. Any rejection in either tree blocks the update.
    """

    organization: str = ""
    new_projects: Dict[str, PolicyCheckResourceNode] = Field(default_factory=dict)
    existing_projects: Dict[str, PolicyCheckResourceNode] = Field(default_factory=dict)

    def _trees(self) -> Iterator[Tuple[str, PolicyCheckResourceNode]]:
        yield from sorted(self.new_projects.items())
        yield from sorted(self.existing_projects.items())

    def rejections(self) -> List[RejectedEntry]:
        entries: List[RejectedEntry] = []
        for project, root in self._trees():
            for node in root.walk():
                if node.policy is not None and node.policy.is_reject:
                    entries.append(
                        RejectedEntry(
                            project=project,
                            resource=node.resource.display_name,
                            policy=node.policy.display_name,
                        )
                    )
        return entries

    def has_rejections(self) -> bool:
        return any(root.has_rejections() for _, root in self._trees())


class InventoryUpdateResult(_WireModel):
    organization: str = ""
    created_projects: List[str] = Field(default_factory=list)
    updated_projects: List[str] = Field(default_factory=list)
