"""
Command-line entry point for Account Data Forms.

Subcommands:
    show    Print an account's data entries as form JSON
    build   Turn form JSON into an unsigned transaction
    verify  Check that an envelope XDR parses
    uri     Wrap an envelope XDR in a signing URI
    init    Write the effective configuration to a file
"""

import argparse
import json
import sys
from pathlib import Path

from adf.logging import configure_logging_from_args, format_exception_summary, get_logger


def build_parser() -> argparse.ArgumentParser:
    """
    Build the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="adf",
        description="Account Data Forms - keep Stellar account data entries in sync with a form",
        epilog="Use 'adf <command> --help' for more information on a specific command.",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (.json, .yaml, .yml); defaults and environment are used if omitted",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (overrides --verbose)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
        required=True,
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Print an account's data entries as form JSON",
    )
    show_parser.add_argument("account_id", help="Account address (G...)")
    show_parser.add_argument("--form", default="participant", help="Form schema (organization, participant, personal)")

    build_cmd = subparsers.add_parser(
        "build",
        help="Build an unsigned transaction from form JSON",
        description="Loads the account, diffs the submission against it, and prints the envelope XDR.",
    )
    build_cmd.add_argument("account_id", help="Account address (G...)")
    build_cmd.add_argument("--form", default="participant", help="Form schema (organization, participant, personal)")
    build_cmd.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Form JSON, e.g. the output of 'adf show' after editing",
    )
    build_cmd.add_argument(
        "--uri",
        action="store_true",
        help="Print a signing URI instead of the raw XDR",
    )
    build_cmd.add_argument(
        "--relay",
        action="store_true",
        help="Send the signing URI to the relay and print the link it returns",
    )

    verify_parser = subparsers.add_parser("verify", help="Check that an envelope XDR parses")
    verify_parser.add_argument("xdr", help="Base64 envelope XDR")

    uri_parser = subparsers.add_parser("uri", help="Wrap an envelope XDR in a signing URI")
    uri_parser.add_argument("xdr", help="Base64 envelope XDR")

    init_parser = subparsers.add_parser("init", help="Write the effective configuration to a file")
    init_parser.add_argument("path", type=Path, help="Destination (.json, .yaml, .yml)")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    return parser


def _load_config(args: argparse.Namespace):
    from adf.config import ADFConfig, load_config_from_file

    if args.config is None:
        config = ADFConfig()
        config.validate()
        return config
    return load_config_from_file(args.config)


def run_show(args: argparse.Namespace, config) -> int:
    from adf.forms import form_state_to_dict, get_schema
    from adf.service import load_account_form

    schema = get_schema(args.form)
    loaded = load_account_form(args.account_id, schema, config)
    if not loaded.has_data:
        print("No existing data found for this account", file=sys.stderr)
    data = {"account_id": args.account_id, **form_state_to_dict(loaded.state, schema)}
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def run_build(args: argparse.Namespace, config) -> int:
    from adf.forms import form_state_from_dict, get_schema
    from adf.relay import RelayClient
    from adf.service import build_signing_uri, build_transaction, load_account_form

    schema = get_schema(args.form)
    raw = json.loads(args.input.read_text(encoding="utf-8"))
    submission = form_state_from_dict(raw, schema)

    loaded = load_account_form(args.account_id, schema, config)
    built = build_transaction(
        args.account_id,
        submission,
        schema,
        config,
        original=loaded.state,
        snapshot=loaded.snapshot,
    )
    for operation in built.operations:
        print(operation.describe(), file=sys.stderr)
    deletions = sum(1 for operation in built.operations if operation.is_delete)
    print(
        f"{len(built.operations) - deletions} to set, {deletions} to delete",
        file=sys.stderr,
    )

    if args.uri or args.relay:
        uri = build_signing_uri(built, config)
        if args.relay:
            print(RelayClient(config.relay).submit(uri))
        else:
            print(uri)
    else:
        print(built.xdr)
    return 0


def run_verify(args: argparse.Namespace, config) -> int:
    from adf.ledger.verifier import is_valid

    if is_valid(args.xdr, config.network.network_passphrase):
        print("valid")
        return 0
    print("invalid")
    return 1


def run_uri(args: argparse.Namespace, config) -> int:
    from adf.relay import build_transaction_uri

    print(build_transaction_uri(
        args.xdr,
        network_passphrase=config.network.network_passphrase,
        msg=config.relay.message,
        return_url=config.relay.return_url,
    ))
    return 0


def run_init(args: argparse.Namespace, config) -> int:
    from adf.config import save_config_to_file

    path = args.path.expanduser()
    if path.exists() and not args.force:
        print(f"Error: {path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1
    save_config_to_file(config, path)
    print(f"Wrote configuration to {path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (for testing)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging_from_args(
        verbose=args.verbose,
        log_level=args.log_level,
        log_file=str(args.log_file) if args.log_file else None,
    )

    logger = get_logger(__name__)
    logger.debug(f"Parsed arguments: {args}")

    if args.config is not None:
        cfg_path = Path(args.config).expanduser().resolve()
        if not cfg_path.exists():
            logger.error(f"Config file not found: {cfg_path}")
            print(f"Error: Configuration file not found: {cfg_path}", file=sys.stderr)
            return 1

    from adf.forms import ValidationError
    from adf.ledger.errors import LedgerError
    from adf.relay import RelayError

    try:
        config = _load_config(args)

        if args.command == "show":
            return run_show(args, config)
        if args.command == "build":
            return run_build(args, config)
        if args.command == "verify":
            return run_verify(args, config)
        if args.command == "uri":
            return run_uri(args, config)
        if args.command == "init":
            return run_init(args, config)

        parser.print_help()
        return 1

    except ValidationError as e:
        for error in e.errors:
            print(f"{error.field}: {error.message}", file=sys.stderr)
        return 1

    except LedgerError as e:
        logger.error(f"Ledger error ({e.category}): {e}")
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    except RelayError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nInterrupted by user.", file=sys.stderr)
        return 130

    except Exception as e:
        logger.exception("Unhandled exception in main")
        print(f"\nError: {format_exception_summary(e)}", file=sys.stderr)
        if args.verbose:
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
