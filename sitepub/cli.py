"""
sitepub - Main CLI interface
Static-site publishing pipeline

Subcommands mirror the stages of a CI job: announce the run, make sure
hugo is installed, then build and publish both variants.
"""
import argparse
import sys

from colorama import init

from . import __version__
from .services.pipeline import Pipeline
from .services.sync import DEFAULT_MAX_UPLOAD_WORKERS
from .utils.logger import get_logger, setup_logging

# Initialize colorama
init(autoreset=True)

log = get_logger(__name__)

# ── Help-text epilogs for subcommands ──────────────────────────────────────

RUN_EXAMPLES = """\
Examples:
  sitepub run
  sitepub --site-dir ~/blog run
  sitepub --config ci/workflow.toml run

Runs the full pipeline for the draft and then the production variant:
  1. hugo build into public/
  2. commit public/ to the GitHub repository
  3. upload files and mirror directories to the OSS bucket
"""

MIRROR_EXAMPLES = """\
Examples:
  sitepub mirror public /srv/www
  sitepub mirror public/posts /srv/www --prefix posts

Everything under the prefix in DEST is deleted before uploading.
"""


def positive_int(value):
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


class Sitepub:
    """Main CLI application class."""

    def __init__(self, args):
        """Initialize CLI application from parsed arguments."""
        self.args = args
        self.pipeline = Pipeline(site_dir=args.site_dir, config_path=args.config)


def create_argument_parser():
    """Create the top-level parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog='sitepub',
        description='Build a Hugo site and publish it to GitHub and object storage',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--site-dir', default='.', help='Site root directory (default: .)')
    parser.add_argument('--config', help='Path to workflow.toml (default: <site-dir>/workflow.toml)')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('--quiet', action='store_true', help='Only show warnings and errors')

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    subparsers.add_parser('start', help='Send the "workflow started" notification')
    subparsers.add_parser('upgrade-hugo', help='Install the hugo version from workflow.toml')
    subparsers.add_parser(
        'run',
        help='Build and publish draft and production',
        epilog=RUN_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    mirror_parser = subparsers.add_parser(
        'mirror',
        help='Mirror a local directory into another directory',
        epilog=MIRROR_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    mirror_parser.add_argument('source', help='Directory to publish')
    mirror_parser.add_argument('dest', help='Destination namespace directory')
    mirror_parser.add_argument('--prefix', default='', help='Key prefix inside DEST')
    mirror_parser.add_argument('--workers', type=positive_int, default=DEFAULT_MAX_UPLOAD_WORKERS,
                               help=f'Concurrent uploads (default: {DEFAULT_MAX_UPLOAD_WORKERS})')

    return parser


# ── Main Entry Point ──────────────────────────────────────────────────────

def main(argv=None):
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    log.info("sitepub %s", args.command)

    from .modes.mirror_handler import MirrorHandler
    from .modes.run_handler import RunHandler
    from .modes.start_handler import StartHandler
    from .modes.upgrade_hugo_handler import UpgradeHugoHandler

    handlers = {
        'start': StartHandler,
        'upgrade-hugo': UpgradeHugoHandler,
        'run': RunHandler,
        'mirror': MirrorHandler,
    }

    app = Sitepub(args)
    try:
        return handlers[args.command](app, args).execute()
    finally:
        log.info("Done.")


if __name__ == '__main__':
    sys.exit(main())
