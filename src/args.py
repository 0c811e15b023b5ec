"""Argument parsing functionality for depimport."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depimport",
        description=(
            "depimport - Reconcile dependency records from another tool into a manifest and lock"
        ),
        add_help=True,
    )

    parser.add_argument("-i", "--input",
                        dest="INPUT",
                        help="Records file (JSON or YAML) listing imported packages",
                        action="store",
                        type=str,
                        required=True)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to the JSON report (default: stdout)",
                        action="store",
                        type=str)
    parser.add_argument("--no-default-constraint",
                        dest="DEFAULT_CONSTRAINT_FROM_LOCK",
                        help="Do not derive a constraint from the locked version when no hint is given",
                        action="store_false",
                        default=None)
    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Report every discarded constraint and fallback decision",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: DEPIMPORT_LOG_LEVEL, else INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--github-api",
                        dest="GITHUB_API",
                        help="List github.com versions through the GitHub REST API instead of git",
                        action="store_true",
                        default=None)
    parser.add_argument("--git-timeout",
                        dest="GIT_TIMEOUT",
                        help="Timeout in seconds for each git ls-remote call",
                        action="store",
                        type=int)

    return parser.parse_args(argv)
