"""
Policy check report artifacts.

The JSON report is the machine-readable artifact attached to the build; the
text file next to it is the summary people open from the build page.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Protocol

from ossgate.config import REPORT_DIR_NAME
from ossgate.integrations.compliance.types import ComplianceVerdict, PolicyCheckResourceNode
from ossgate.reporting.write_report import write_json_report_atomic, write_text_report_atomic

SCHEMA_VERSION = "policy_check_report_v1"
REPORT_JSON_NAME = "policy-check-report.json"
REPORT_TEXT_NAME = "policy-check-report.txt"


class PolicyReportGenerator(Protocol):
    def generate(
        self,
        verdict: ComplianceVerdict,
        project_name: str,
        build_number: str,
        destination_dir: Path,
    ) -> Path:
        ...


def _summarize_tree(projects: Dict[str, PolicyCheckResourceNode]) -> List[Dict[str, Any]]:
    summary = []
    for name, root in sorted(projects.items()):
        libraries = [node for node in root.walk() if node is not root]
        summary.append(
            {
                "project": name,
                "library_count": len(libraries),
                "rejected": root.has_rejections(),
            }
        )
    return summary


def build_policy_report(verdict: ComplianceVerdict, project_name: str, build_number: str) -> Dict[str, Any]:
    rejections = [entry.model_dump() for entry in verdict.rejections()]
    return {
        "schema_version": SCHEMA_VERSION,
        "project": project_name,
        "build_number": build_number,
        "organization": verdict.organization,
        "has_rejections": bool(rejections),
        "rejection_count": len(rejections),
        "rejections": rejections,
        "new_projects": _summarize_tree(verdict.new_projects),
        "existing_projects": _summarize_tree(verdict.existing_projects),
    }


def render_text_summary(report: Dict[str, Any]) -> str:
    lines = [
        f"Policy check report for {report['project']} #{report['build_number']}",
        f"Organization: {report['organization']}",
    ]
    if not report["has_rejections"]:
        lines.append("All dependencies conform with open source policies.")
        return "\n".join(lines)
    lines.append(f"{report['rejection_count']} rejected libraries:")
    for entry in report["rejections"]:
        lines.append(f"  - {entry['resource']} ({entry['project']}): rejected by policy '{entry['policy']}'")
    return "\n".join(lines)


class PolicyCheckReportGenerator:
    def generate(
        self,
        verdict: ComplianceVerdict,
        project_name: str,
        build_number: str,
        destination_dir: Path,
    ) -> Path:
        out_dir = Path(destination_dir) / REPORT_DIR_NAME
        report = build_policy_report(verdict, project_name, build_number)
        json_path = out_dir / REPORT_JSON_NAME
        write_json_report_atomic(str(json_path), report)
        write_text_report_atomic(str(out_dir / REPORT_TEXT_NAME), render_text_summary(report))
        return json_path
