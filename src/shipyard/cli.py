"""Command-line interface for shipyard.

Enables execution via ``python -m shipyard.cli`` or a plain ``shipyard``
command after install. The host build system calls ``shipyard run`` once
per build with the workspace and build number it owns.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

# ── Human-readable help strings ──────────────────────────────────────────────

_TOP_DESCRIPTION = """\
Maven, Docker and Kubernetes build-and-deploy pipeline.

Runs a fixed sequence of stages against a build workspace: maven build,
docker build, docker push and kubectl deploy, followed by an image prune and
cleanup phase that always runs. Facts derived along the way (IMAGE,
APP_NAME, VERSION) are passed between stages as environment variables.
"""

_TOP_EPILOG = """\
Quick examples:
  shipyard run pipeline.yaml --workspace . --build-number 42
  shipyard run pipeline.yaml -w /ws -n 7 --param REGISTRY=reg.example.com
  shipyard validate pipeline.yaml
"""

_RUN_DESCRIPTION = """\
Execute the pipeline against a workspace and emit the result as JSON.

Build parameters (--param flags take precedence over --params-json) seed the
environment before any stage runs. Values found later in the project's
dockerBuildInfo file never overwrite them.
"""

_RUN_EPILOG = """\
Output schema (JSON written to stdout, or to the --output file):

  {
    "success": <bool>,           -- false iff a main-phase stage failed
    "stage_results": [
      {
        "stage_name": <str>,
        "phase": "main" | "cleanup",
        "status": "succeeded" | "skipped" | "failed",
        "detail": <str|null>,    -- skip reason or error
        "duration_ms": <num>
      }
    ],
    "environment": {<str>: <str>},
    "description": <str|null>,
    "error": <str|null>,
    "total_duration_ms": <num>
  }

Exit codes:
  0 -- the main phase succeeded
  1 -- a stage failed, or the configuration/workspace is invalid
"""

_VALIDATE_DESCRIPTION = """\
Load a pipeline configuration and print the stage plan without running it.
"""


# ── Argument parser ───────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shipyard",
        description=_TOP_DESCRIPTION,
        epilog=_TOP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command")

    # ── run ──────────────────────────────────────────────────────────────────
    run_p = sub.add_parser(
        "run",
        help="Run the pipeline and emit the result as JSON",
        description=_RUN_DESCRIPTION,
        epilog=_RUN_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_p.add_argument(
        "pipeline",
        type=Path,
        help="Path to the pipeline YAML configuration",
    )
    run_p.add_argument(
        "--workspace", "-w",
        type=Path,
        default=Path.cwd(),
        metavar="DIR",
        help="Build workspace root (default: current directory).",
    )
    run_p.add_argument(
        "--build-number", "-n",
        type=int,
        required=True,
        metavar="N",
        help="Build ordinal from the host build system; used in the image tag.",
    )
    run_p.add_argument(
        "--param", "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Build parameter. Repeatable; overrides keys from --params-json.",
    )
    run_p.add_argument(
        "--params-json",
        type=Path,
        metavar="FILE",
        help="JSON file containing a top-level object of build parameters.",
    )
    run_p.add_argument(
        "--output", "-o",
        type=Path,
        metavar="FILE",
        help="Write JSON output to FILE instead of stdout.",
    )
    run_p.add_argument(
        "--log-dir",
        type=Path,
        metavar="DIR",
        help="Write JSONL execution events to DIR/pipeline.log.",
    )

    # ── validate ─────────────────────────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Load a configuration and print its stage plan",
        description=_VALIDATE_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    val_p.add_argument(
        "pipeline",
        type=Path,
        help="Path to the pipeline YAML configuration",
    )

    return parser


# ── Command handlers ──────────────────────────────────────────────────────────

def _parse_params(raw: list[str], params_json: Path | None) -> dict[str, str]:
    """Build the parameter dict from --param flags and/or --params-json."""
    data: dict[str, str] = {}

    if params_json is not None:
        try:
            with open(params_json) as f:
                loaded: Any = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error: cannot read --params-json {params_json}: {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(loaded, dict):
            print(
                f"Error: --params-json must contain a JSON object, got {type(loaded).__name__}",
                file=sys.stderr,
            )
            sys.exit(1)
        data.update({str(k): str(v) for k, v in loaded.items()})

    for pair in raw:
        if "=" not in pair:
            print(f"Error: --param values must be KEY=VALUE, got {pair!r}", file=sys.stderr)
            sys.exit(1)
        key, value = pair.split("=", 1)
        data[key] = value

    return data


async def _cmd_run(args: argparse.Namespace) -> int:
    from shipyard import BuildLog, PipelineError, configure_logging, load_pipeline, run_pipeline

    if args.log_dir:
        configure_logging(args.log_dir)

    params = _parse_params(args.param, args.params_json)
    try:
        definition = load_pipeline(args.pipeline)
        # keep stdout clean for the JSON result
        result = await run_pipeline(
            definition,
            args.workspace,
            args.build_number,
            params,
            log=BuildLog(sys.stderr) if args.output is None else BuildLog(sys.stdout),
        )
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = json.dumps(result.model_dump(mode="json"), indent=2)

    if args.output:
        args.output.write_text(text)
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(text)

    return 0 if result.success else 1


def _cmd_validate(args: argparse.Namespace) -> int:
    from shipyard import PipelineLoadError, load_pipeline, plan_stages

    try:
        definition = load_pipeline(args.pipeline)
    except PipelineLoadError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    stages = plan_stages(definition)
    for stage in stages:
        marker = "-" if stage.disabled else "+"
        print(f"{marker} {stage.kind}")
    enabled = sum(1 for s in stages if not s.disabled)
    print(f"Pipeline is valid ({enabled} of {len(stages)} stages enabled)")
    return 0


# ── Entry point ───────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        sys.exit(asyncio.run(_cmd_run(args)))
    elif args.command == "validate":
        sys.exit(_cmd_validate(args))


if __name__ == "__main__":
    main()
