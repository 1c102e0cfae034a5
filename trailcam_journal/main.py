"""Command line front end for the trail-camera journal."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
import sys

from loguru import logger

from trailcam_journal.app.viewmodels.entries_vm import EntriesVM
from trailcam_journal.app.viewmodels.review_vm import ReviewVM
from trailcam_journal.app.viewmodels.stats_vm import StatsVM
from trailcam_journal.core.models import Coordinate, DraftFilter, LocationMode, TagMode
from trailcam_journal.core.services.batch_service import parse_tags
from trailcam_journal.core.services.entry_store import EntryStore
from trailcam_journal.core.services.interfaces import BatchValidationError
from trailcam_journal.core.services.location_service import SavedLocationStore
from trailcam_journal.core.services.stats_service import StatsTimeframe
from trailcam_journal.infrastructure.csv_repository import (
    CsvEntryRepository,
    CsvSavedLocationRepository,
)
from trailcam_journal.infrastructure.delete_service import PhotoCleanupService
from trailcam_journal.infrastructure.logging import find_latest_log_file, init_logging
from trailcam_journal.infrastructure.photo_import import PhotoImportService
from trailcam_journal.infrastructure.settings import JsonSettings

DEFAULT_SETTINGS = Path.home() / ".trailcam_journal" / "settings.json"


@dataclass
class App:
    settings: JsonSettings
    store: EntryStore
    locations: SavedLocationStore
    importer: PhotoImportService
    log_dir: Path

    @classmethod
    def build(cls, settings: JsonSettings) -> App:
        log_dir = settings.storage_path("logging.dir")
        init_logging(log_dir, level=str(settings.get("logging.level", "INFO")), console=True)
        photos_dir = settings.storage_path("storage.photos_dir")
        cleanup = PhotoCleanupService(photos_dir, use_trash=bool(settings.get("photos.use_trash", True)))
        store = EntryStore(CsvEntryRepository(settings.storage_path("storage.entries_file")), cleanup)
        locations = SavedLocationStore(
            CsvSavedLocationRepository(settings.storage_path("storage.saved_locations_file"))
        )
        return cls(settings, store, locations, PhotoImportService(photos_dir), log_dir)


def _resolve_ids(store: EntryStore, raw_ids: list[str]) -> set[str]:
    """Expand unique id prefixes to full ids; unknown prefixes are kept as-is."""
    resolved: set[str] = set()
    for raw in raw_ids:
        matches = [e.id for e in store if e.id.startswith(raw)]
        resolved.add(matches[0] if len(matches) == 1 else raw)
    return resolved


def _row(entry, label: str, status: str = "") -> str:
    species = entry.species or "-"
    extra = f"  [{status}]" if status else ""
    return f"{entry.id[:8]}  {entry.date:%Y-%m-%d %H:%M}  {species:<14} {label}{extra}"


def cmd_import(app: App, args: argparse.Namespace) -> int:
    created = app.store.import_photos(app.importer.import_files(args.paths))
    print(f"Imported {len(created)} image(s).")
    if not created:
        print("No images were imported. Check file permissions or image format.")
        return 1
    return 0


def cmd_list(app: App, args: argparse.Namespace) -> int:
    vm = EntriesVM(app.store, app.locations)
    for entry in vm.search(args.search or ""):
        print(_row(entry, vm.location_label(entry)))
    return 0


def cmd_review(app: App, args: argparse.Namespace) -> int:
    vm = ReviewVM(app.store, app.locations)
    vm.set_filter(DraftFilter(args.filter))
    print(vm.progress_text)
    for entry in vm.visible_drafts():
        print(_row(entry, app.locations.label_for(entry), vm.status_for(entry)))
    return 0


def _validate_edit(app: App, args: argparse.Namespace) -> None:
    """Reject the whole edit request before any field is applied.

    Raises:
        BatchValidationError: On the first invalid field.
    """
    if args.species is not None and not args.species.strip():
        raise BatchValidationError("Species must not be empty")
    if args.tags is not None and not parse_tags(args.tags):
        raise BatchValidationError("No tags given")
    has_coordinate = args.lat is not None or args.lon is not None
    if has_coordinate:
        if args.lat is None or args.lon is None:
            raise BatchValidationError("Both --lat and --lon are required")
        if args.location_unknown or args.clear_location or args.saved_location is not None:
            raise BatchValidationError("--lat/--lon conflicts with another location option")
    if args.saved_location is not None and app.locations.get(args.saved_location) is None:
        raise BatchValidationError(f"Unknown saved location: {args.saved_location}")


def cmd_edit(app: App, args: argparse.Namespace) -> int:
    try:
        _validate_edit(app, args)
    except BatchValidationError as ex:
        print(f"Rejected: {ex}", file=sys.stderr)
        return 2

    vm = ReviewVM(app.store, app.locations)
    vm.enter_selection_mode()
    vm.selection.select_all(_resolve_ids(app.store, args.ids))
    vm.refresh()
    updated = vm.selected_count
    if args.species is not None:
        vm.apply_species(args.species)
    if args.location_unknown:
        vm.apply_location(LocationMode.UNKNOWN)
    elif args.clear_location:
        vm.apply_location(LocationMode.CLEAR)
    elif args.saved_location is not None:
        vm.apply_saved_location(args.saved_location)
    elif args.lat is not None:
        vm.apply_location(LocationMode.COORDINATE, Coordinate(args.lat, args.lon))
    if args.camera is not None:
        vm.apply_camera(args.camera)
    if args.tags is not None:
        vm.apply_tags(args.tags, TagMode.REPLACE if args.replace_tags else TagMode.ADD)
    print(f"Updated {updated} draft(s).")
    return 0


def cmd_finalize(app: App, args: argparse.Namespace) -> int:
    vm = ReviewVM(app.store, app.locations)
    vm.enter_selection_mode()
    if args.all:
        vm.select_all_visible()
    else:
        vm.selection.select_all(_resolve_ids(app.store, args.ids))
        vm.refresh()
    result = vm.finalize_selected()
    print(result.message)
    return 0


def _default_timeframe(settings: JsonSettings) -> StatsTimeframe:
    """Timeframe from settings, LAST_30 when the configured value is unknown."""
    value = settings.get("stats.default_timeframe")
    try:
        return StatsTimeframe(value)
    except ValueError:
        logger.warning(
            "Unknown stats.default_timeframe {!r}, using {}", value, StatsTimeframe.LAST_30.value
        )
        return StatsTimeframe.LAST_30


def cmd_stats(app: App, args: argparse.Namespace) -> int:
    if args.timeframe:
        timeframe = StatsTimeframe(args.timeframe)
    else:
        timeframe = _default_timeframe(app.settings)
    summary = StatsVM(app.store).summary(timeframe, args.camera)
    m = summary.metric
    print(
        f"{summary.timeframe.value}: {m.entries} entries, {m.active_days} active days, "
        f"{m.unique_species} species, {m.unique_locations} locations, {m.unique_cameras} cameras"
    )
    for rank in summary.top_species:
        print(f"  {rank.name:<14} {rank.count}")
    print(f"Day {summary.day} / Night {summary.night}")
    return 0


def cmd_purge_drafts(app: App, args: argparse.Namespace) -> int:
    if args.everything:
        app.store.delete_all_entries()
    else:
        app.store.delete_all_drafts()
    print(f"{len(app.store)} entries remain.")
    return 0


def cmd_info(app: App, args: argparse.Namespace) -> int:
    print(f"Entries total:    {len(app.store)}")
    print(f"Drafts:           {len(app.store.drafts)}")
    print(f"Saved locations:  {len(app.locations)}")
    print(f"Latest log:       {find_latest_log_file(app.log_dir) or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trailcam-journal", description=__doc__)
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Import photos as draft entries")
    p.add_argument("paths", nargs="+")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("list", help="List finalized entries")
    p.add_argument("--search")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("review", help="Show the draft queue")
    p.add_argument("--filter", default=DraftFilter.ALL.value, choices=[f.value for f in DraftFilter])
    p.set_defaults(func=cmd_review)

    p = sub.add_parser("edit", help="Batch edit drafts")
    p.add_argument("ids", nargs="+")
    p.add_argument("--species")
    p.add_argument("--camera")
    p.add_argument("--tags", help="comma separated")
    p.add_argument("--replace-tags", action="store_true")
    loc = p.add_mutually_exclusive_group()
    loc.add_argument("--location-unknown", action="store_true")
    loc.add_argument("--clear-location", action="store_true")
    loc.add_argument("--saved-location")
    p.add_argument("--lat", type=float)
    p.add_argument("--lon", type=float)
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("finalize", help="Finalize drafts")
    p.add_argument("ids", nargs="*")
    p.add_argument("--all", action="store_true", help="every visible draft")
    p.set_defaults(func=cmd_finalize)

    p = sub.add_parser("stats", help="Show statistics")
    p.add_argument(
        "--timeframe",
        choices=[t.value for t in StatsTimeframe],
    )
    p.add_argument("--camera")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("purge-drafts", help="Delete all drafts")
    p.add_argument("--everything", action="store_true", help="delete finalized entries too")
    p.set_defaults(func=cmd_purge_drafts)

    p = sub.add_parser("info", help="Show storage summary")
    p.set_defaults(func=cmd_info)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    app = App.build(JsonSettings(args.settings))
    logger.info("Running command: {}", args.command)
    return int(args.func(app, args))


if __name__ == "__main__":
    raise SystemExit(main())
