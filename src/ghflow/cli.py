# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click
import yaml
from click.core import ParameterSource
from pydantic import ValidationError

from ghflow import settings
from ghflow.dag import validate
from ghflow.generate import GenerateError, generate as generate_file, to_yaml
from ghflow.model import Workflow
from ghflow.ui.console import Console, get_console, set_console
from ghflow.workflow import WorkflowConfig, load_config


def resolve_config(
    config_path: str | None,
    *,
    name: str | None = None,
    auto_release: bool | None = None,
    benchmarks: bool | None = None,
    auto_fix: bool | None = None,
) -> WorkflowConfig:
    """
    Build the effective configuration.

    Precedence: command-line flags > config file > defaults. Without
    --config, settings.CONFIG_FILE is used when it exists.
    """
    console = get_console()

    if config_path:
        base = load_config(config_path)
        console.print_debug(f"Loaded config from {config_path}")
    elif Path(settings.CONFIG_FILE).exists():
        base = load_config(settings.CONFIG_FILE)
        console.print_debug(f"Loaded config from {settings.CONFIG_FILE}")
    else:
        base = WorkflowConfig()

    overrides = {
        "name": name,
        "auto_release": auto_release,
        "benchmarks": benchmarks,
        "auto_fix": auto_fix,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return base
    return WorkflowConfig.model_validate({**base.model_dump(), **overrides})


_WORKFLOW_OPTIONS = [
    click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
                 help=f"YAML config file (defaults to {settings.CONFIG_FILE} if present)"),
    click.option("--name", default=None, help="Workflow name"),
    click.option("--auto-release/--no-auto-release", default=None, help="Add release and release-pr jobs"),
    click.option("--benchmarks/--no-benchmarks", default=None, help="Run cargo bench in the build job"),
    click.option("--auto-fix/--no-auto-fix", default=None, help="Auto-commit fmt fixes on pull requests"),
]


def workflow_options(fn):
    """Feature-flag options shared by every command."""
    for option in reversed(_WORKFLOW_OPTIONS):
        fn = option(fn)
    return fn


_FLAGS = ("name", "auto_release", "benchmarks", "auto_fix")


def _load(ctx) -> Workflow:
    console = get_console()
    # only flags given on the command line override the config file
    overrides = {
        key: ctx.params[key]
        for key in _FLAGS
        if ctx.get_parameter_source(key) is ParameterSource.COMMANDLINE
    }
    try:
        config = resolve_config(ctx.params["config_path"], **overrides)
    except FileNotFoundError as e:
        console.print_error(
            "Config file not found",
            str(e),
            suggestion="Create the file or drop --config to use defaults.",
        )
        sys.exit(1)
    except yaml.YAMLError as e:
        console.print_error("Invalid YAML in config file", str(e))
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        console.print_error(
            "Could not read config file",
            str(e),
            suggestion="--config must point to a readable UTF-8 YAML file.",
        )
        sys.exit(1)
    except ValidationError as e:
        console.print_error(
            "Invalid configuration",
            f"{e.error_count()} error(s) in workflow configuration",
            details=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        )
        sys.exit(1)

    console.print_debug(f"Config: {config.model_dump()}")
    return config.to_github_workflow()


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """ghflow: feature-flag driven GitHub Actions workflow generator."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@workflow_options
@click.option("--root", default=None, type=click.Path(file_okay=False),
              help="Repository root (defaults to the git top-level directory)")
@click.option("--check/--no-check", default=None,
              help="Verify the file is up to date instead of writing it (default: on when CI is set)")
@click.pass_context
def generate(ctx, config_path, name, auto_release, benchmarks, auto_fix, root, check):
    """Write the workflow file, or check that it is up to date."""
    console = get_console()
    if ctx.get_parameter_source("check") is not ParameterSource.COMMANDLINE:
        check = None  # decided by settings.in_ci()
    workflow = _load(ctx)
    console.print_workflow_summary(workflow.name, workflow.job_ids)

    try:
        path = generate_file(workflow, root=root, check=check)
    except GenerateError as e:
        console.print_error(
            e.message,
            e.path,
            details=[f"{k}: {v}" for k, v in e.details.items()],
        )
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    is_check = check if check is not None else settings.in_ci()
    if is_check:
        console.print_up_to_date(str(path))
    else:
        console.print_written(str(path))


@cli.command()
@workflow_options
@click.pass_context
def show(ctx, config_path, name, auto_release, benchmarks, auto_fix):
    """Print the rendered workflow YAML to stdout."""
    workflow = _load(ctx)
    click.echo(to_yaml(workflow), nl=False)


@cli.command()
@workflow_options
@click.pass_context
def plan(ctx, config_path, name, auto_release, benchmarks, auto_fix):
    """Print job stages as GitHub Actions will schedule them."""
    console = get_console()
    workflow = _load(ctx)
    jobs = workflow.jobs_by_id()

    console.print_header(workflow.name)
    for index, stage in enumerate(validate(workflow.jobs), start=1):
        console.print_stage(index, stage)
        for job_id in stage:
            job = jobs[job_id]
            detail = f"{len(job.steps)} steps"
            if job.cond is not None:
                detail += f", if {job.cond.render()}"
            if job.concurrency is not None:
                detail += f", concurrency {job.concurrency.group}"
            console.print_plan_job(job_id, detail)


if __name__ == "__main__":
    cli()
