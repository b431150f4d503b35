from .dsl import JobBuilder, WorkflowBuilder, checkout, job, sh
from .expr import And, Equals, Expr, Field, Not, Or, is_branch, is_pull_request, is_push
from .generate import GenerateError, to_dict, to_yaml
from .model import Concurrency, Event, Job, Level, Permissions, Step, StepKind, Workflow
from .workflow import WorkflowConfig, assemble, load_config

__all__ = [
    "JobBuilder", "WorkflowBuilder", "checkout", "job", "sh",
    "And", "Equals", "Expr", "Field", "Not", "Or", "is_branch", "is_pull_request", "is_push",
    "GenerateError", "to_dict", "to_yaml",
    "Concurrency", "Event", "Job", "Level", "Permissions", "Step", "StepKind", "Workflow",
    "WorkflowConfig", "assemble", "load_config",
]
