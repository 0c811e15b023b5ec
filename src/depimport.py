"""depimport - Reconcile another dependency manager's records into a manifest and lock.

Reads a list of imported package records, consolidates them by project root
and writes the resulting manifest, lock and per-project decisions as JSON.

    Returns:
        int: Exit code
"""
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import yaml

from args import parse_args
from cli_config import ConfigError, configure
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from importers import BaseImporter, ImportDecision, ImportedPackage
from sources import GitSourceManager, ProjectRootError, SourceError, SourceManager
from versioning.models import Branch, Tag, Version

logger = logging.getLogger(__name__)

# Accepted spellings for each record field, first match wins.
_FIELD_ALIASES = {
    "name": ("name", "package", "import_path", "path"),
    "lock_hint": ("lock_hint", "revision", "rev", "version", "ref"),
    "source": ("source", "repository", "repo", "url"),
    "constraint_hint": ("constraint_hint", "constraint", "branch"),
}


class RecordsError(ValueError):
    """Raised when the records file cannot be read or has the wrong shape."""


def _record_field(record: Dict[str, Any], field: str) -> str:
    for key in _FIELD_ALIASES[field]:
        value = record.get(key)
        if value is None or value == "":
            continue
        # YAML turns unquoted 1.10 into the float 1.1, so values must be strings.
        if not isinstance(value, str):
            raise RecordsError(f"'{key}' must be a string, got {value!r}; quote it in the records file")
        return value.strip()
    return ""


def load_records(file_name: str) -> List[ImportedPackage]:
    """Loads imported package records from a JSON or YAML file.

    The file holds either a list of records or a mapping with a ``packages``
    list. A record is a mapping or a bare package path.

    Raises:
        RecordsError: if the file is unreadable or malformed.
    """
    try:
        with open(file_name, encoding="utf-8") as file:
            if file_name.lower().endswith(".json"):
                data = json.load(file)
            else:
                data = yaml.safe_load(file)
    except OSError as e:
        raise RecordsError(f"cannot read {file_name}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RecordsError(f"cannot parse {file_name}: {e}") from e

    if isinstance(data, dict):
        data = data.get("packages")
    if not isinstance(data, list):
        raise RecordsError(f"{file_name} must contain a list of package records")

    packages = []
    for index, record in enumerate(data):
        if isinstance(record, str):
            record = {"name": record}
        if not isinstance(record, dict):
            raise RecordsError(f"record {index} in {file_name} is not a mapping")
        name = _record_field(record, "name")
        if not name:
            raise RecordsError(f"record {index} in {file_name} has no package name")
        packages.append(ImportedPackage(
            name=name,
            lock_hint=_record_field(record, "lock_hint"),
            source=_record_field(record, "source"),
            constraint_hint=_record_field(record, "constraint_hint"),
        ))
    return packages


def _version_fields(version: Optional[Version]) -> Dict[str, Optional[str]]:
    fields: Dict[str, Optional[str]] = {"version": None, "branch": None, "revision": None}
    if version is None:
        return fields
    if isinstance(version, Tag):
        fields["version"] = version.name
    elif isinstance(version, Branch):
        fields["branch"] = version.name
    if version.revision is not None:
        fields["revision"] = str(version.revision)
    return fields


def _describe(error: Exception) -> str:
    if error.__cause__ is not None:
        return f"{error}: {error.__cause__}"
    return str(error)


def build_report(importer: BaseImporter, decisions: List[ImportDecision]) -> Dict[str, Any]:
    """Render the manifest, lock and decisions of an import run as plain data."""
    manifest = {
        root: {"source": props.source or None, "constraint": str(props.constraint)}
        for root, props in importer.manifest.constraints.items()
    }
    lock = []
    for locked in importer.lock.projects:
        entry: Dict[str, Any] = {
            "name": locked.identifier.root,
            "source": locked.identifier.source or None,
        }
        entry.update(_version_fields(locked.version))
        entry["packages"] = list(locked.packages)
        lock.append(entry)
    decision_rows = [
        {
            "name": d.identifier.root,
            "constraint": str(d.constraint),
            "version": str(d.version) if d.version is not None else None,
            "outcomes": [o.value for o in d.outcomes],
            "discarded_constraint": (
                str(d.discarded_constraint) if d.discarded_constraint is not None else None
            ),
            "error": d.error,
        }
        for d in decisions
    ]
    return {"manifest": manifest, "lock": lock, "decisions": decision_rows}


def export_json(report: Dict[str, Any], path: Optional[str]) -> None:
    """Writes the report to a file, or to stdout when no path is given.

    Raises:
        OSError: if the file cannot be written.
    """
    text = json.dumps(report, ensure_ascii=False, indent=4)
    if not path:
        sys.stdout.write(text + "\n")
        return
    with open(path, "w", encoding="utf-8") as file:
        file.write(text + "\n")
    logging.info("JSON file has been successfully exported at: %s", path)


def run_import(
    packages: List[ImportedPackage],
    source_manager: SourceManager,
    verbose: bool = False,
    default_constraint_from_lock: bool = True,
) -> Dict[str, Any]:
    """Import the packages with a fresh importer and return the report."""
    importer = BaseImporter(source_manager, verbose=verbose)
    decisions = importer.import_packages(packages, default_constraint_from_lock)
    return build_report(importer, decisions)


def main(argv=None, source_manager: Optional[SourceManager] = None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    try:
        configure(args)
    except ConfigError as e:
        logging.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        packages = load_records(args.INPUT)
    except RecordsError as e:
        logging.error("%s, aborting", e)
        return ExitCodes.FILE_ERROR.value

    if not packages:
        logging.warning("No packages found in the input list.")

    sm = source_manager if source_manager is not None else GitSourceManager()
    try:
        report = run_import(
            packages,
            sm,
            verbose=args.VERBOSE,
            default_constraint_from_lock=Constants.DEFAULT_CONSTRAINT_FROM_LOCK,
        )
    except ProjectRootError as e:
        logging.error("%s", _describe(e))
        return ExitCodes.IMPORT_ERROR.value
    except SourceError as e:
        logging.error("%s", _describe(e))
        return ExitCodes.CONNECTION_ERROR.value

    try:
        export_json(report, args.OUTPUT)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        return ExitCodes.FILE_ERROR.value

    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
