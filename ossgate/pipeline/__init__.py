from ossgate.pipeline.orchestrator import PipelineOrchestrator
from ossgate.pipeline.types import BuildContext, BuildKind, BuildOutcome, RunResult

__all__ = ["BuildContext", "BuildKind", "BuildOutcome", "PipelineOrchestrator", "RunResult"]
