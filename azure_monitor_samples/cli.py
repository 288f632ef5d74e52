from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Mapping, Optional, Sequence

from azure_monitor_samples.config import (
    load_credentials,
    load_settings,
    maybe_load_dotenv,
    missing_configuration_instructions,
)
from azure_monitor_samples.errors import ConfigurationError, MonitorSampleError
from azure_monitor_samples.logging_config import configure_logging
from azure_monitor_samples.runner import Authenticator, run_samples


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIGURATION = 1
EXIT_FAILURE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="azure-monitor-samples",
        description="Run read-only Azure Monitor metric definition and metrics queries against one resource.",
    )
    parser.add_argument(
        "resource_id",
        help="Fully-qualified resource id, e.g. /subscriptions/<sub>/resourceGroups/<rg>/providers/<type>/<name>.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum records printed per response (defaults to MONITOR_DISPLAY_LIMIT or 5).",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    authenticator: Optional[Authenticator] = None,
) -> int:
    maybe_load_dotenv()
    configure_logging()
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if not args.resource_id.strip():
        parser.error("resource_id must not be empty.")

    try:
        credentials = load_credentials(environ)
        overrides = {"display_limit": args.limit} if args.limit is not None else {}
        settings = load_settings(**overrides)
    except ConfigurationError as exc:
        logger.error("%s: %s", exc, ", ".join(exc.missing) or "see settings")
        if exc.missing:
            print(missing_configuration_instructions())
        else:
            print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION

    kwargs = {"settings": settings}
    if authenticator is not None:
        kwargs["authenticator"] = authenticator

    try:
        asyncio.run(run_samples(credentials, args.resource_id, **kwargs))
    except MonitorSampleError as exc:
        logger.error("Run aborted: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
