import argparse
import logging
import signal
import subprocess
import sys
from pathlib import Path
from typing import Sequence

from .archive import ArchiveFormat, ArchiveRequest
from .backup import backup
from .config import load_config, resolve_options
from .errors import GistBackupError, MissingCredential, MissingTarget
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

SIGTERM_EXIT = 128 + signal.SIGTERM
SIGINT_EXIT = 128 + signal.SIGINT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gistbak",
        description="back up every gist of a github account as local git clones",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-t", "--token", help="GitHub API token")
    parser.add_argument("-d", "--directory", help="backup directory, kept after the run")

    archive = parser.add_mutually_exclusive_group()
    archive.add_argument(
        "-ab", "--archive-bzip2", metavar="PATH", help="write a bzip2 tar archive to PATH"
    )
    archive.add_argument(
        "-ag", "--archive-gzip", metavar="PATH", help="write a gzip tar archive to PATH"
    )

    parser.add_argument("--debug", action="store_true", help="Set log level as DEBUG")
    return parser


def archive_request(args: argparse.Namespace) -> ArchiveRequest | None:
    if args.archive_bzip2:
        return ArchiveRequest(ArchiveFormat.BZIP2, Path(args.archive_bzip2))
    if args.archive_gzip:
        return ArchiveRequest(ArchiveFormat.GZIP, Path(args.archive_gzip))
    return None


def _terminate(signum, frame):
    raise SystemExit(SIGTERM_EXIT)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)

    setup_logging(args.debug)

    logger.debug(f"directory={args.directory} archive={archive_request(args)}")
    if unknown:
        logger.debug(f"ignore unknown arguments {unknown}")

    try:
        config = load_config()
    except Exception as e:
        logger.error(f"Error: bad config: {e}")
        sys.exit(1)

    try:
        options = resolve_options(
            args.token, args.directory, archive_request(args), config
        )
    except (MissingCredential, MissingTarget) as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: {e}", file=sys.stderr)
        sys.exit(1)

    signal.signal(signal.SIGTERM, _terminate)

    try:
        backup(options, config)
    except KeyboardInterrupt:
        logger.error("interrupted")
        sys.exit(SIGINT_EXIT)
    except subprocess.CalledProcessError as e:
        logger.error(f"Error: {e}")
        sys.exit(e.returncode if e.returncode > 0 else 1)
    except GistBackupError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error: {e}")
        logger.debug("traceback", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
