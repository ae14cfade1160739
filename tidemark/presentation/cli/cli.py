"""
CLI Module

Architectural Intent:
- Command-line interface for tidemark
- Resolves the service name (--name flag, then config) before any core call
- Delegates to application use cases via the composition root
- Supports --verbose/--debug flags for log level control
"""

import argparse
import asyncio
import logging
import sys
import traceback

from tidemark.domain.exceptions import (
    RollbackRejectedError,
    TidemarkError,
)
from tidemark.infrastructure.config import (
    ServiceNameMissingError,
    load_config,
    resolve_service_name,
)
from tidemark.infrastructure.logging import configure_logging
from tidemark.presentation.formatters import (
    BETA_BANNER,
    format_detail,
    format_error,
    format_history,
    format_rollback,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tidemark",
        description="Tidemark: inspect and roll back serverless script deployments",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines on stderr"
    )
    parser.add_argument(
        "--config", "-c", default=None, help="Path to tidemark.json configuration"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser(
        "list", help="🚢 Display the most recent deployments of a service"
    )
    list_parser.add_argument("--name", help="The name of your service")
    list_parser.add_argument(
        "--limit", "-l", type=int, default=None, help="Number of deployments to show"
    )

    show_parser = subparsers.add_parser(
        "show", help="Inspect one deployment, its bindings and script"
    )
    show_parser.add_argument("deployment_id", help="The ID of the deployment you want to inspect")
    show_parser.add_argument("--name", help="The name of your service")
    show_parser.add_argument(
        "--no-script", action="store_true", help="Do not print the script source"
    )

    rollback_parser = subparsers.add_parser("rollback", help="🔙 Rollback a deployment")
    rollback_parser.add_argument("deployment_id", help="The ID of the deployment to roll back to")
    rollback_parser.add_argument("--name", help="The name of your service")
    rollback_parser.add_argument(
        "--message", "-m", default=None, help="Reason recorded with the rollback"
    )
    rollback_parser.add_argument(
        "--verify",
        action="store_true",
        help="Read the current history first and refuse unknown deployment IDs locally",
    )
    return parser


async def async_main():
    parser = build_parser()
    args = parser.parse_args()

    config = load_config(args.config)

    # Configure logging based on flags
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = config.log_level
    configure_logging(level=level, json_format=args.json_logs or config.json_logs)

    verbose = args.verbose or args.debug

    if args.command is None:
        parser.print_help()
        return

    try:
        service_name = resolve_service_name(args.name, config)
    except ServiceNameMissingError as e:
        print(format_error(e))
        sys.exit(1)

    from tidemark import composition_root

    print(BETA_BANNER)
    print()
    try:
        container = composition_root.create_container(config)
    except ValueError as e:
        print(f"[-] Configuration error: {e}")
        sys.exit(1)

    try:
        if args.command == "list":
            limit = args.limit if args.limit is not None else config.display.history_limit
            listing = await container.list_deployments.execute(service_name, limit=limit)
            print(format_history(listing))
            return

        if args.command == "show":
            detail = await container.show_deployment.execute(
                service_name, args.deployment_id, include_script=not args.no_script
            )
            print(format_detail(detail))
            return

        if args.command == "rollback":
            known_history = None
            if args.verify:
                known_history = await container.history_fetcher.fetch_history(service_name)
            result = await container.rollback.execute(
                service_name, args.deployment_id, args.message, known_history=known_history
            )
            print(format_rollback(result))
            return
    except RollbackRejectedError as e:
        print(format_error(e))
        if e.outcome_unknown:
            print("[*] The rollback may still have been applied. Run `tidemark list` before retrying.")
        if verbose:
            traceback.print_exc()
        sys.exit(1)
    except TidemarkError as e:
        print(format_error(e))
        if verbose:
            traceback.print_exc()
        sys.exit(1)
    except Exception as e:
        print(f"[-] {args.command.capitalize()} failed: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(1)
    finally:
        await container.close()


def main():
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
