from __future__ import annotations

import time

import typer

from pubkit.cli.context import CLIContext, build_context
from pubkit.cli.menu import run_interactive
from pubkit.cli.prompt import TerminalPrompt
from pubkit.core.errors import ErrorCode
from pubkit.core.result import Err, Ok, Result
from pubkit.services.errors import ReleaseError
from pubkit.services.orchestrator import ReleaseOrchestrator

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Interactive clean, build and publish for an npm package.",
)


def _run(ctx: CLIContext) -> Result[None, ReleaseError]:
    if ctx.config_error is not None:
        return Err(ReleaseError(kind="invalid_config", message=ctx.config_error))

    prompt = TerminalPrompt()
    orchestrator = ReleaseOrchestrator(
        root=ctx.root,
        config=ctx.config,
        console=ctx.console,
        prompt=prompt,
    )
    result = run_interactive(prompt, orchestrator)
    if isinstance(result, Err):
        return result
    return Ok(None)


@app.command()
def release() -> None:
    """Pick an action from the menu and run it."""
    ctx = build_context()

    try:
        result = _run(ctx)
        if isinstance(result, Err) and not result.error.is_cancellation:
            ctx.console.error(result.error.pretty())
    except KeyboardInterrupt:
        ctx.console.error("interrupted")
    except Exception as e:
        ctx.console.error(str(e) or type(e).__name__)
    finally:
        ctx.console.newline()
        time.sleep(ctx.config.exit_delay)

    raise typer.Exit(code=int(ErrorCode.OK))


def main() -> None:
    app()
