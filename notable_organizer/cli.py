"""Command-line interface for Notable Organizer.

Usage:
    # Organize loose notes and a Notable export into a dated ZIP
    notable-organizer notes/ export.zip

    # Choose the output file and add .url shortcuts beside every stub
    notable-organizer notes/ -o organized.zip --url-shortcuts

    # Preview without writing anything
    notable-organizer notes/ --dry-run -v
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import inflection

from notable_organizer import __version__
from notable_organizer.archive import default_archive_name, write_archive
from notable_organizer.config import OrganizerConfig, load_config
from notable_organizer.core.models import FAILED, DocumentOutcome, OrganizerError, SessionResult
from notable_organizer.core.organizer import DUPLICATE_POLICIES
from notable_organizer.core.session import OrganizeSession

logger = logging.getLogger(__name__)


def setup_logging(verbose: int = 0, quiet: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure logging based on verbosity settings.

    Args:
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        quiet: If True, only show ERROR messages
        log_file: Optional path to log file (always logs at DEBUG level)
    """
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True,
    )

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))
        root = logging.getLogger()
        root.addHandler(fh)
        root.setLevel(logging.DEBUG)
        for handler in root.handlers:
            if handler is not fh:
                handler.setLevel(level)
        logger.info(f"Logging to file: {log_file}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='notable-organizer',
        description='Organize tagged Markdown notes into tag folders inside a ZIP archive.',
    )
    parser.add_argument('inputs', nargs='+', type=Path,
                        help='Markdown files, ZIP archives or directories to organize')
    parser.add_argument('-o', '--output', type=Path,
                        help='Output ZIP path (default: notable-notes-organized-<date>.zip)')
    parser.add_argument('-c', '--config', type=Path, help='YAML config file')
    parser.add_argument('--url-shortcuts', action='store_true', default=None,
                        help='Also write a .url shortcut for every secondary tag')
    parser.add_argument('--preserve-header', action='store_true', default=None,
                        help='Keep the frontmatter block in the canonical copy')
    parser.add_argument('--required-tag', action='append', dest='required_tags',
                        help='Only organize notes with this tag (repeatable)')
    parser.add_argument('--excluded-tag', action='append', dest='excluded_tags',
                        help='Skip notes with this tag (repeatable)')
    parser.add_argument('--on-duplicate', choices=DUPLICATE_POLICIES,
                        help='What to do when two notes map to the same path')
    parser.add_argument('--dry-run', action='store_true',
                        help='Organize in memory without writing the archive')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (-v for INFO, -vv for DEBUG)')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only show errors')
    parser.add_argument('--log-file', type=Path, help='Also log at DEBUG level to this file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> OrganizerConfig:
    config = load_config(args.config) if args.config else OrganizerConfig()
    return config.merged(
        emit_url_shortcuts=args.url_shortcuts,
        preserve_header=args.preserve_header,
        required_tags=args.required_tags,
        excluded_tags=args.excluded_tags,
        duplicate_policy=args.on_duplicate,
    )


def _count(n: int, word: str) -> str:
    return f"{n} {word if n == 1 else inflection.pluralize(word)}"


def print_summary(result: SessionResult, output: Optional[Path]) -> None:
    print(f"{_count(result.folder_count, 'folder')} created")
    print(f"{_count(len(result.organized), 'file')} organized")
    if result.skipped:
        print(f"{len(result.skipped)} skipped by tag filters")
    for failure in result.failures:
        print(f"  failed: {failure.filename}: {failure.error}")
    if output is not None:
        print(f"Archive written to {output}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    def log_outcome(outcome: DocumentOutcome) -> None:
        if outcome.status == FAILED:
            logger.error(f"{outcome.filename}: {outcome.error}")
        else:
            logger.info(f"{outcome.filename}: {outcome.status}")

    try:
        config = build_config(args)
        session = OrganizeSession(config)
        for path in args.inputs:
            session.add_path(path)
        result = session.run(observer=log_outcome, dry_run=args.dry_run)

        output = None
        if not args.dry_run:
            output = args.output or Path(default_archive_name(config.archive_prefix))
            write_archive(result.tree, output, compresslevel=config.compress_level)
            logger.info(f"Wrote {len(result.tree)} entries to {output}")
    except (OrganizerError, OSError) as e:
        logger.error(str(e))
        return 1

    print_summary(result, output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
