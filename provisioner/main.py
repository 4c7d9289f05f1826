from __future__ import annotations

import argparse
import logging
from functools import partial
from typing import Callable, List, Optional, Sequence

from .config import ProvisionConfig, default_config_path, load_config
from .context import StepContext
from .lib.launcher import launcher_path
from .lib.workspace import Workspace
from .logging_utils import configure_logging, log_ok
from .pipeline import RESUME_HINT, PipelineResult, Step, run_pipeline
from .prompts import InputFn, ask_line, ask_yes_no
from .reinstall import maybe_reset
from .resolver import InputError, resolve_config_value
from .state_store import load_state, save_state, state_file_exists
from .steps import (
    ConfigureProjectStep,
    CreateLauncherStep,
    FetchProjectStep,
    InstallDependenciesStep,
    InstallPrerequisitesStep,
    LaunchApplicationStep,
)

logger = logging.getLogger(__name__)

PROJECT_ID_VAR = "project_id"

StepFactory = Callable[[StepContext], Sequence[Step]]


def build_steps(ctx: StepContext) -> List[Step]:
    # New steps go between existing ordinals so old checkpoints stay valid.
    return [
        Step.from_action(InstallPrerequisitesStep(ctx)),
        Step.from_action(FetchProjectStep(ctx)),
        Step.from_action(ConfigureProjectStep(ctx)),
        Step.from_action(InstallDependenciesStep(ctx)),
        Step.from_action(CreateLauncherStep(ctx)),
        Step.from_action(LaunchApplicationStep(ctx)),
    ]


def run(
    *,
    cfg: ProvisionConfig,
    project_id: Optional[str] = None,
    input_fn: InputFn = input,
    step_factory: StepFactory = build_steps,
) -> PipelineResult:
    """Resume provisioning from the saved checkpoint.

    Raises InputError when no usable project id can be determined and
    OSError when the workspace reset fails or the project id cannot be saved.
    """

    state_path = cfg.state_file
    save = partial(save_state, state_path)

    present = state_file_exists(state_path)
    state = load_state(state_path)
    workspace = Workspace.from_path(cfg.workspace_dir)
    logger.info("Loaded state from %s (done_step=%d)", state_path, state.done_step)

    maybe_reset(
        state_file_present=present,
        workspace_exists=workspace.exists(),
        confirm=lambda: ask_yes_no(
            f"An existing installation was found in {workspace.root}. Delete it and reinstall from scratch?",
            input_fn=input_fn,
        ),
        reset=workspace.remove,
        state=state,
        save=save,
    )

    resolution = resolve_config_value(
        persisted=state.saved_variables.get(PROJECT_ID_VAR),
        override=project_id,
        prompt=lambda: ask_line("Enter the project ID", input_fn=input_fn),
    )
    if resolution.changed:
        state.saved_variables[PROJECT_ID_VAR] = resolution.value
        save(state)
    logger.info("Using project id %s", resolution.value)

    ctx = StepContext(cfg=cfg, workspace=workspace, project_id=resolution.value)
    steps = list(step_factory(ctx))
    result = run_pipeline(steps=steps, state=state, save=save)

    if result.ok and not result.ran_steps:
        log_ok(
            logger,
            "Provisioning already complete; start the application with %s",
            launcher_path(workspace.root, cfg.launcher_name),
        )
    elif result.ok:
        log_ok(logger, "All steps completed (last step %d)", result.last_done)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="provisioner",
        description="Set up the project step by step, resuming where the last run stopped.",
    )
    p.add_argument("project_id", nargs="?", default=None, help="Project ID (overrides the saved one)")
    args = p.parse_args(argv)

    try:
        cfg = load_config(default_config_path())
    except (OSError, ValueError) as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        return 1

    configure_logging(log_path=cfg.log_file)

    try:
        result = run(cfg=cfg, project_id=args.project_id)
    except InputError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        # Failed workspace reset or unsaved project id; nothing past the checkpoint ran.
        logger.error("%s", e)
        logger.error(RESUME_HINT)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted. %s", RESUME_HINT)
        return 1
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
