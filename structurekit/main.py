"""StructureKit — application entry point.

Boots the FastAPI server and provides the CLI entry point for analysing a
chart-state file, a bundled demo chart, or serving the API.
"""

import logging

from fastapi import FastAPI

from structurekit.api.routers import router

app = FastAPI(title="StructureKit API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("structurekit")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _build_parser():
    import argparse

    parser = argparse.ArgumentParser(description="StructureKit chart-structure analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyse a chart-state JSON file")
    analyze.add_argument("file", help="Path to a chart_state JSON file")
    analyze.add_argument(
        "--top-down",
        nargs="*",
        default=[],
        metavar="FILE",
        help="Higher-timeframe chart_state files, highest first",
    )
    analyze.add_argument("--json", action="store_true", help="Print the full JSON record")

    demo = sub.add_parser("demo", help="Analyse a bundled demo chart")
    demo.add_argument("--index", type=int, default=0, help="Demo index (default: 0)")
    demo.add_argument("--json", action="store_true", help="Print the full JSON record")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--port", type=int, default=None, help="Port (default: from settings)")
    return parser


def _load_state(path: str):
    import json
    import pathlib

    from structurekit.api.schemas import parse_chart_state

    raw = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
    return parse_chart_state(raw)


def run_cli(argv=None) -> int:
    """Parse CLI arguments and dispatch.  Returns a process exit code."""
    import json

    from pydantic import ValidationError

    from structurekit.cli.console import print_analysis
    from structurekit.config import load_settings
    from structurekit.demo import get_demo_state
    from structurekit.engine import analyze_multi, build_analysis

    args = _build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        from structurekit.api.routers import configure_routers

        configure_routers(settings)
        port = args.port or settings.api_port
        logger.info("StructureKit API listening on port %d", port)
        uvicorn.run(app, host="0.0.0.0", port=port, log_level=settings.log_level.lower())
        return 0

    if args.command == "demo":
        result = build_analysis(get_demo_state(args.index), settings=settings)
    else:
        try:
            state = _load_state(args.file)
            higher = [_load_state(p) for p in args.top_down]
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("Cannot read chart state: %s", exc)
            return 2
        if higher:
            result = analyze_multi([*higher, state], settings=settings)
        else:
            result = build_analysis(state, settings=settings)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_analysis(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(run_cli())
