"""Print a filtered project listing or its map markers from the command line."""
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Sequence, TextIO
from urllib.parse import parse_qs

import pandas as pd

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if __package__ is None or __package__ == "":
    _PROJECT_ROOT_STR = str(_PROJECT_ROOT)
    if _PROJECT_ROOT_STR not in sys.path:
        sys.path.insert(0, _PROJECT_ROOT_STR)

from src.utils.logger import configure_logging, logger
from src.core.labels import SOURCE_LABELS, status_label
from src.infrastructure.events.urgency import UrgencyClassifier, to_calendar_date
from src.infrastructure.filters.query_state import parse_filter_state, to_query_string
from src.infrastructure.storage.dataframe_store import DataFrameProjectStore
from src.use_cases.build_map_markers import BuildMapMarkersUseCase
from src.use_cases.list_projects import ListProjectsUseCase
from src.utils.config import AppConfig, get_page_size, load_config, resolve_data_paths


def build_store(config: AppConfig, root: Path) -> DataFrameProjectStore:
    projects_path, categories_path, dates_path = resolve_data_paths(config, root)
    return DataFrameProjectStore.from_files(projects_path, categories_path, dates_path)


def listing_frame(store: DataFrameProjectStore, query: str, page_size: int) -> pd.DataFrame:
    state = parse_filter_state(parse_qs(query, keep_blank_values=False))
    logger.info("Listing projects for '{}'", to_query_string(state) or "<default>")
    listing = ListProjectsUseCase(store, page_size=page_size).execute(state)

    rows = []
    for project in listing.projects:
        category = listing.categories_by_id.get(project.category_id or "")
        rows.append(
            {
                "id": project.id,
                "title": project.title,
                "category": category.name if category else "",
                "status": status_label(project.status),
                "source": SOURCE_LABELS[project.source],
                "neighborhood": project.neighborhood or "",
                "votes": project.vote_score,
                "comments": project.comment_count,
                "created_at": project.created_at.date().isoformat(),
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "id",
            "title",
            "category",
            "status",
            "source",
            "neighborhood",
            "votes",
            "comments",
            "created_at",
        ],
    )


def markers_frame(store: DataFrameProjectStore, query: str, today: date) -> pd.DataFrame:
    state = parse_filter_state(parse_qs(query, keep_blank_values=False))
    listing = ListProjectsUseCase(store).execute(state, paginate=False)
    markers = BuildMapMarkersUseCase().execute(
        listing.projects,
        listing.categories_by_id,
        today,
        next_dates=store.next_dates(today),
    )
    return pd.DataFrame(
        [
            {
                "id": marker.id,
                "title": marker.title,
                "latitude": marker.latitude,
                "longitude": marker.longitude,
                "color": marker.category_color,
                "urgency": marker.urgency_color.value if marker.urgency_color else "",
            }
            for marker in markers
        ],
        columns=["id", "title", "latitude", "longitude", "color", "urgency"],
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List Streetwise projects")
    parser.add_argument("--config", type=Path, default=_PROJECT_ROOT / "configs" / "config.yaml")
    parser.add_argument(
        "--query",
        default="",
        help="URL query string, e.g. 'status=planned&status=completed&sort=votes'",
    )
    parser.add_argument("--markers", action="store_true", help="Print map markers as CSV")
    parser.add_argument("--today", default=None, help="Reference date (YYYY-MM-DD)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None, output: TextIO = sys.stdout) -> None:
    args = parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.get("logging", {}).get("level", "INFO"))
    store = build_store(config, _PROJECT_ROOT)

    if args.markers:
        fixed_today = to_calendar_date(args.today) if args.today else None
        classifier = UrgencyClassifier(today_provider=(lambda: fixed_today) if fixed_today else None)
        frame = markers_frame(store, args.query, classifier.today())
    else:
        frame = listing_frame(store, args.query, get_page_size(config))

    frame.to_csv(output, index=False)


if __name__ == "__main__":
    main()
