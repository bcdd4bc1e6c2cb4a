import argparse
import json
import re
import sys
from pathlib import Path

from ossgate import __version__
from ossgate.config import DEFAULT_CONFIG_PATH

BUILD_RESULTS = ["SUCCESS", "UNSTABLE", "FAILURE", "ABORTED", "NOT_BUILT"]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ossgate")
    sub = p.add_subparsers(dest="cmd", required=True)

    publish_p = sub.add_parser("publish", help="Check policies and report open source usage for a finished build.")
    publish_p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to settings yaml")
    publish_p.add_argument("--build-kind", default="generic", help="multi_module, generic or freestyle_maven")
    publish_p.add_argument("--build-result", default="SUCCESS", choices=BUILD_RESULTS, help="Result of the build so far")
    publish_p.add_argument("--workspace", default=".", help="Build workspace scanned by the generic extractor")
    publish_p.add_argument("--modules", help="Resolved module manifest (yaml/json) for multi_module builds")
    publish_p.add_argument("--project-name", help="Job display name (defaults to workspace directory name)")
    publish_p.add_argument("--build-number", default="0")
    publish_p.add_argument("--build-dir", help="Directory for report artifacts (defaults to workspace)")
    publish_p.add_argument("--format", default="text", choices=["text", "json"])

    validate_p = sub.add_parser("validate-config", help="Validate the settings file.")
    validate_p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to settings yaml")
    validate_p.add_argument("--format", default="text", choices=["text", "json"])

    sub.add_parser("version", help="Print version.")
    return p


def _build_extractor(args, job):
    from ossgate.inventory import GenericOssInfoExtractor, MultiModuleOssInfoExtractor, load_module_manifest
    from ossgate.pipeline.types import BuildKind

    if args.build_kind == BuildKind.MULTI_MODULE.value:
        if not args.modules:
            raise ValueError("--modules is required for multi_module builds")
        modules = load_module_manifest(args.modules)
        return MultiModuleOssInfoExtractor(
            modules,
            modules_to_include=job.modules_to_include,
            modules_to_exclude=job.modules_to_exclude,
            project_token=job.module_project_token,
            module_tokens=job.module_tokens,
            ignore_pom_modules=job.ignore_pom_modules,
        )
    return GenericOssInfoExtractor(
        args.workspace,
        lib_includes=job.lib_includes,
        lib_excludes=job.lib_excludes,
        project_token=job.project_token,
        project_name=args.project_name,
    )


def _publish(args) -> int:
    from ossgate.integrations.compliance.proxy import HostProxyConfiguration
    from ossgate.pipeline import BuildContext, PipelineOrchestrator
    from ossgate.settings import load_settings_file

    try:
        global_settings, job = load_settings_file(args.config)
        extractor = _build_extractor(args, job)
    except (FileNotFoundError, ValueError, re.error) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    workspace = Path(args.workspace)
    build = BuildContext(
        project_name=args.project_name or workspace.resolve().name,
        build_number=str(args.build_number),
        build_dir=Path(args.build_dir) if args.build_dir else workspace,
    )
    orchestrator = PipelineOrchestrator(global_settings, host_proxy=HostProxyConfiguration.from_environment())
    result = orchestrator.run(
        prior_build_succeeded=args.build_result == "SUCCESS",
        build_kind=args.build_kind,
        job=job,
        build=build,
        extractor=extractor,
    )

    if args.format == "json":
        print(json.dumps(result.as_dict(), indent=2))
    else:
        print(f"{result.outcome.value}: {result.message}")
        if result.report_path:
            print(f"Report: {result.report_path.as_posix()}")
    return 1 if result.outcome.fails_build else 0


def _validate_config(args) -> int:
    from ossgate.settings import load_settings_file, validate_settings

    try:
        global_settings, job = load_settings_file(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    report = validate_settings(global_settings, job)
    if args.format == "json":
        print(json.dumps(report, indent=2))
    else:
        print(f"Settings: {report['status']} ({report['error_count']} errors, {report['warning_count']} warnings)")
        for issue in report["issues"]:
            location = f" [{issue['location']}]" if issue.get("location") else ""
            print(f"  {issue['severity']} {issue['code']}{location}: {issue['message']}")
    return 0 if report["ok"] else 1


def main() -> int:
    # If no arguments provided, show help
    if len(sys.argv) == 1:
        sys.argv.append("--help")

    p = build_parser()
    args = p.parse_args()

    if args.cmd == "version":
        print(f"ossgate {__version__}")
        return 0

    from ossgate.observability import configure_logging

    configure_logging()

    if args.cmd == "publish":
        return _publish(args)

    if args.cmd == "validate-config":
        return _validate_config(args)

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
