#!/usr/bin/env python3
"""
runr - Interactive GitHub Actions workflow dispatcher

Main entry point: runs the guided wizard, or lists saved replays.
"""

import argparse
import sys
from typing import List, Optional

from runr import __version__, replays
from runr.config import resolve_config_path
from runr.errors import RunrError
from runr.log import setup_logging
from runr.session import SessionState, WorkflowSession
from runr.ui import bold, grey, header, red, sep, yellow

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def list_replays(config_path) -> None:
    """Print every saved replay in the config."""
    config = replays.load(config_path)
    saved = replays.all_replays(config)

    header("💾  Saved Replays", str(config_path))
    if not saved:
        print(yellow("  No replays saved yet.\n"))
        return

    for r in saved:
        print(f"  {bold(r.nickname):<30} {r.workflow}  {grey(r.repo + '@' + r.branch)}")
        for key, value in r.inputs.items():
            print(f"      {grey(f'{key:<15}')} : {value}")
        sep(char="·")
    print()


def _report(error: RunrError) -> None:
    print(red(f"❌  {error}"), file=sys.stderr)
    if error.hint:
        print(yellow(f"   {error.hint}"), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the runr CLI."""
    parser = argparse.ArgumentParser(
        prog="runr",
        description="runr - pick a repo, branch and workflow, fill in its inputs, and dispatch it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  runr                              # Guided wizard
  runr --replay staging-deploy      # Re-run a saved invocation
  runr --list-replays               # Show saved invocations
  runr --config ~/work/runr.yml     # Use a specific config file

Config search order:
  --config, $RUNR_CONFIG, $XDG_CONFIG_HOME/runr/config.yml,
  ~/.config/runr/config.yml, platform config dir, ./config.yml
        """
    )
    parser.add_argument(
        '-c', '--config',
        type=str,
        default=None,
        help='Path to config.yml (default: searched, see below)'
    )
    parser.add_argument(
        '--replay',
        metavar='NICKNAME',
        type=str,
        default=None,
        help='Re-run a saved replay without answering prompts'
    )
    parser.add_argument(
        '--list-replays',
        action='store_true',
        help='List saved replays and exit'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show debug output (gh commands, config details)'
    )
    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'runr {__version__}'
    )

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)
    config_path = resolve_config_path(args.config)

    try:
        if args.list_replays:
            list_replays(config_path)
            return EXIT_OK

        session = WorkflowSession(config_path, replay_nickname=args.replay)
        state = session.run()
    except RunrError as e:
        _report(e)
        return EXIT_ERROR
    except KeyboardInterrupt:
        # Ctrl+C while waiting on gh rather than on a prompt
        print(yellow("\n  Operation cancelled."))
        return EXIT_CANCELLED

    if state is SessionState.CANCELLED:
        return EXIT_CANCELLED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
