# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from refcompose.adapters.documents import reference_to_payload
from refcompose.app import import_document, verify_document, verify_stored
from refcompose.config import ConfigurationError, configure_logging, parse_log_level
from refcompose.domain.errors import CompositionError, InvalidRecordError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from refcompose.domain.composition import ResolvedReferenceSet

log = logging.getLogger(__name__)


def _add_verify_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--set",
        dest="set_ids",
        action="append",
        default=None,
        metavar="SET_ID",
        help="Reference set id to verify (repeatable)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail when a declared checksum does not match the computed one",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Abort a resolution after this many seconds",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print resolved views as JSON",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compose and verify genomic reference sets")
    parser.add_argument(
        "--log-level",
        type=str,
        help="Log level name or number (defaults to REFCOMPOSE_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser("verify", help="Verify reference sets in a JSON bundle")
    verify.add_argument("document", type=str, help="Path to the JSON bundle")
    _add_verify_options(verify)

    import_ = subparsers.add_parser("import", help="Store a JSON bundle in the database")
    import_.add_argument("document", type=str, help="Path to the JSON bundle")

    verify_db = subparsers.add_parser("verify-db", help="Verify reference sets in the database")
    _add_verify_options(verify_db)

    return parser.parse_args(list(argv))


def _print_views(views: list[ResolvedReferenceSet], *, as_json: bool) -> None:
    if as_json:
        payload = [
            {
                **view.to_dict(),
                "references": [
                    reference_to_payload(reference) for reference in view.sorted_references()
                ],
            }
            for view in views
        ]
        print(json.dumps(payload, indent=2))
        return
    for view in views:
        status = "ok" if view.checksum_matches else "checksum mismatch"
        print(
            f"{view.id}: {status} "
            f"(references={len(view.references)}, joins={len(view.joins)}, "
            f"computed={view.computed_checksum}, declared={view.declared_checksum})"
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        level = parse_log_level(parsed_args.log_level) if parsed_args.log_level else None
        configure_logging(level=level)
        if getattr(parsed_args, "timeout", None) is not None and parsed_args.timeout <= 0:
            raise ValueError("Timeout must be positive")  # noqa: TRY301
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "verify":
            views = verify_document(
                parsed_args.document,
                parsed_args.set_ids,
                strict=parsed_args.strict,
                timeout=parsed_args.timeout,
            )
            _print_views(views, as_json=parsed_args.json)
        elif parsed_args.command == "import":
            result = import_document(parsed_args.document)
            print(
                f"Imported reference_sets={result.reference_sets}, "
                f"references={result.references}, joins={result.joins}"
            )
        elif parsed_args.command == "verify-db":
            if not parsed_args.set_ids:
                raise ValueError("verify-db requires at least one --set")  # noqa: TRY301
            views = verify_stored(
                parsed_args.set_ids,
                strict=parsed_args.strict,
                timeout=parsed_args.timeout,
            )
            _print_views(views, as_json=parsed_args.json)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except CompositionError:
        log.exception("Reference set verification failed")
        sys.exit(1)
    except (ValidationError, InvalidRecordError, OSError):
        log.exception("Could not read records")
        sys.exit(2)
    except SQLAlchemyError:
        log.exception("Could not store or load records")
        sys.exit(2)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
