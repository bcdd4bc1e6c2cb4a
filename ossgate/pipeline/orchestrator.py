from __future__ import annotations

import logging
from typing import Callable, List, Optional, Union

from ossgate.config import RUN_LOGGER_NAME, is_report_generation_enabled
from ossgate.integrations.compliance.client import ComplianceServiceClient, create_service_client
from ossgate.integrations.compliance.proxy import HostProxyConfiguration
from ossgate.integrations.compliance.types import ComplianceVerdict
from ossgate.inventory.extractors import OssInfoExtractor
from ossgate.inventory.types import ProjectInfo
from ossgate.pipeline.types import (
    BuildContext,
    BuildKind,
    BuildOutcome,
    RunResult,
    SUPPORTED_BUILD_KINDS,
    build_kind_value,
)
from ossgate.reporting.policy_report import PolicyCheckReportGenerator, PolicyReportGenerator
from ossgate.reporting.update_log import log_update_result
from ossgate.settings.models import EffectiveConfig, GlobalSettings, JobSettings
from ossgate.settings.resolve import resolve_effective_config

REJECTED_MESSAGE = "Open source rejected by organization policies."
CONFORMS_MESSAGE = "All dependencies conform with open source policies."

ClientFactory = Callable[[EffectiveConfig], ComplianceServiceClient]


class PipelineOrchestrator:
    """
    Runs the post-build compliance pipeline for one build and classifies the
    result into a BuildOutcome. Holds only read-only collaborators, so one
    instance may serve concurrent, unrelated runs.
    """

    def __init__(
        self,
        global_settings: GlobalSettings,
        *,
        client_factory: Optional[ClientFactory] = None,
        report_generator: Optional[PolicyReportGenerator] = None,
        run_logger: Optional[logging.Logger] = None,
        host_proxy: Optional[HostProxyConfiguration] = None,
    ):
        self.global_settings = global_settings
        self.client_factory = client_factory or create_service_client
        self.report_generator = report_generator or PolicyCheckReportGenerator()
        self.log = run_logger or logging.getLogger(RUN_LOGGER_NAME)
        self.host_proxy = host_proxy

    def run(
        self,
        *,
        prior_build_succeeded: bool,
        build_kind: Union[BuildKind, str],
        job: JobSettings,
        build: BuildContext,
        extractor: OssInfoExtractor,
    ) -> RunResult:
        self.log.info("Updating compliance service")

        if not prior_build_succeeded:
            self.log.info("Build failed. Skipping update.")
            return RunResult(BuildOutcome.CONTINUE_SUCCESS, "Build failed. Skipping update.")

        kind = build_kind_value(build_kind)
        if kind == BuildKind.FREESTYLE_MAVEN.value:
            message = "Free style maven jobs are not supported in this version. See plugin documentation."
            self.log.info(message)
            return RunResult(BuildOutcome.CONTINUE_SUCCESS, message)

        config = resolve_effective_config(job, self.global_settings, self.host_proxy)
        if config is None:
            self.log.info("No API token configured. Skipping update.")
            return RunResult(BuildOutcome.CONTINUE_SUCCESS, "No API token configured. Skipping update.")

        self.log.info("Collecting OSS usage information")
        if kind not in SUPPORTED_BUILD_KINDS:
            return self._stop_build(f"Unrecognized build type {kind or '<empty>'}")

        product = config.product
        try:
            projects = list(extractor.extract() or [])
            if kind == BuildKind.MULTI_MODULE.value and not product:
                product = extractor.top_most_project_name()
        except Exception as exc:
            return self._stop_on_error(config, exc)

        if not projects:
            self.log.info("No open source information found.")
            return RunResult(BuildOutcome.CONTINUE_SUCCESS, "No open source information found.")

        try:
            client = self.client_factory(config)
        except Exception as exc:
            return self._stop_on_error(config, exc)
        try:
            return self._check_and_update(client, config, product, projects, build)
        except Exception as exc:
            return self._stop_on_error(config, exc)
        finally:
            self._release(client)

    def _check_and_update(
        self,
        client: ComplianceServiceClient,
        config: EffectiveConfig,
        product: Optional[str],
        projects: List[ProjectInfo],
        build: BuildContext,
    ) -> RunResult:
        if config.should_check_policies:
            self.log.info("Checking policies")
            verdict = client.check_policy_compliance(
                config.api_token,
                product,
                config.product_version,
                projects,
                config.check_all_libraries,
            )
            report_path = self._policy_check_report(verdict, build)
            if verdict.has_rejections():
                return self._stop_build(REJECTED_MESSAGE, report_path=report_path)
            self.log.info(CONFORMS_MESSAGE)

        self.log.info("Sending to compliance service")
        result = client.update(
            config.api_token,
            config.requester_email,
            product,
            config.product_version,
            projects,
        )
        log_update_result(result, self.log)
        return RunResult(BuildOutcome.CONTINUE_SUCCESS, "Inventory updated.")

    def _policy_check_report(self, verdict: ComplianceVerdict, build: BuildContext):
        if not is_report_generation_enabled():
            return None
        self.log.info("Generating policy check report")
        try:
            return self.report_generator.generate(verdict, build.project_name, build.build_number, build.build_dir)
        except Exception:
            # The verdict decides the outcome; a missing report must not change it.
            self.log.exception("Failed to write policy check report")
            return None

    def _release(self, client: ComplianceServiceClient) -> None:
        try:
            client.shutdown()
        except Exception:
            # The outcome is already decided; a failed release is only reported.
            self.log.exception("Failed to release compliance service client")

    def _stop_build(self, message: str, report_path=None) -> RunResult:
        self.log.error(message)
        return RunResult(BuildOutcome.MARK_UNSTABLE_OR_FAILED, message, report_path=report_path)

    def _stop_on_error(self, config: EffectiveConfig, exc: Exception) -> RunResult:
        self.log.error("Compliance publisher failure: %s", exc, exc_info=exc)
        if config.fail_on_error:
            return RunResult(BuildOutcome.CONDITIONALLY_FAILED, f"Compliance publisher failure: {exc}")
        return RunResult(BuildOutcome.CONTINUE_SUCCESS, f"Compliance publisher failure ignored: {exc}")
