"""Streamlit interface for the Streetwise project tracker."""
from __future__ import annotations

import html
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, cast
from uuid import uuid4

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

CURRENT_FILE = Path(__file__).resolve()
for candidate in CURRENT_FILE.parents:
    if (candidate / "pyproject.toml").exists():
        project_root = candidate
        break
else:
    project_root = CURRENT_FILE.parents[3]

project_root_str = str(project_root)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

PROJECT_ROOT = project_root

from src.utils.logger import configure_logging, logger

from src.core.entities import (
    Category,
    FilterState,
    Project,
    SortKey,
    SuggestionInput,
)
from src.core.errors import SubmissionError
from src.core.labels import (
    SORT_LABELS,
    SOURCE_LABELS,
    STATUS_COLORS,
    URGENCY_COLORS,
    URGENCY_LABELS,
    date_type_label,
    source_label,
    status_label,
)
from src.infrastructure.auth.session import SessionAuthProvider
from src.infrastructure.events.urgency import UrgencyClassifier
from src.infrastructure.filters.query_state import (
    clear_filters,
    parse_filter_state,
    to_query_dict,
    toggle_category,
    toggle_neighborhood,
    toggle_source,
    toggle_status,
    with_page,
    with_sort,
)
from src.infrastructure.geo.resolver import ReverseGeocoder
from src.infrastructure.storage.dataframe_store import DataFrameProjectStore
from src.interface.web.map_html import build_google_map_html, build_marker_points
from src.use_cases.build_map_markers import BuildMapMarkersUseCase
from src.use_cases.list_projects import FilterOptions, ListProjectsUseCase, ProjectListing
from src.use_cases.project_detail import ProjectDetail, ProjectDetailUseCase
from src.use_cases.suggest_project import SuggestProjectUseCase
from src.utils.config import (
    AppConfig,
    GeocodingConfig,
    ListingConfig,
    LoggingConfig,
    MapsConfig,
    StorageConfig,
    get_google_maps_api_key,
    get_map_center,
    get_page_size,
    load_config,
    resolve_data_paths,
)
from src.utils.formatting import format_date, format_relative_time, get_initials, pluralize

VIEW_PARAM = "view"
PROJECT_PARAM = "project"
VIEWS: dict[str, str] = {"map": "Map", "projects": "Projects", "suggest": "Suggest"}


@dataclass(frozen=True)
class UseCases:
    store: DataFrameProjectStore
    list_projects: ListProjectsUseCase
    project_detail: ProjectDetailUseCase
    map_markers: BuildMapMarkersUseCase
    suggest_project: SuggestProjectUseCase


@st.cache_data
def load_app_config(path: Path) -> AppConfig:
    return load_config(path)


@st.cache_resource
def load_store(
    projects_path: Path,
    categories_path: Optional[Path],
    dates_path: Optional[Path],
    persist: bool = False,
) -> DataFrameProjectStore:
    return DataFrameProjectStore.from_files(
        projects_path, categories_path, dates_path, persist=persist
    )


@st.cache_resource
def load_geocoder(user_agent: str, timeout: int) -> ReverseGeocoder:
    logger.info("Initialising reverse geocoder ({})", user_agent)
    return ReverseGeocoder(user_agent=user_agent, timeout=timeout)


def build_geocoder(config: AppConfig) -> Optional[ReverseGeocoder]:
    geocoding = cast(GeocodingConfig, config.get("geocoding", {}))
    if not geocoding.get("enabled", False):
        return None
    return load_geocoder(
        str(geocoding.get("user_agent") or "streetwise"),
        int(geocoding.get("timeout", 5) or 5),
    )


def create_use_cases(config: AppConfig) -> UseCases:
    projects_path, categories_path, dates_path = resolve_data_paths(config, PROJECT_ROOT)
    storage = cast(StorageConfig, config.get("storage", {}))
    store = load_store(
        projects_path,
        categories_path,
        dates_path,
        persist=bool(storage.get("persist_suggestions", False)),
    )
    return UseCases(
        store=store,
        list_projects=ListProjectsUseCase(store, page_size=get_page_size(config)),
        project_detail=ProjectDetailUseCase(store),
        map_markers=BuildMapMarkersUseCase(),
        suggest_project=SuggestProjectUseCase(store, location_describer=build_geocoder(config)),
    )


def navigate(view: str, state: Optional[FilterState] = None, **extra: str) -> None:
    """Write the view and filter state to the URL and rerun the script."""
    params: dict[str, object] = dict(to_query_dict(state)) if state is not None else {}
    params[VIEW_PARAM] = view
    params.update(extra)
    st.query_params.from_dict(params)
    st.rerun()


def _badge(text: str, background: str, color: str) -> str:
    return (
        f'<span style="background:{background};color:{color};padding:2px 8px;'
        f'border-radius:12px;font-size:12px;font-weight:600">{html.escape(text)}</span>'
    )


def _project_badges(project: Project, category: Optional[Category]) -> str:
    background, color = STATUS_COLORS[project.status]
    badges = [_badge(status_label(project.status), background, color)]
    if category is not None:
        badges.insert(0, _badge(category.name, category.color, "#ffffff"))
    return " ".join(badges)


def render_sidebar_auth(auth: SessionAuthProvider) -> None:
    user = auth.current_user()
    st.sidebar.markdown("### Account")
    if user is not None:
        st.sidebar.write(f"**{get_initials(user.display_name or user.email)}** {user.display_name or user.email}")
        if st.sidebar.button("Sign out"):
            auth.sign_out()
            st.rerun()
        return

    with st.sidebar.form("sign-in-form"):
        email = st.text_input("Email")
        display_name = st.text_input("Display name")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        try:
            auth.sign_in(email, display_name)
        except ValueError as error:
            st.sidebar.error(str(error))
            return
        st.rerun()


def render_filter_controls(state: FilterState, options: FilterOptions) -> Optional[FilterState]:
    """Render filter widgets; return the new state when the user changed one."""
    updated: Optional[FilterState] = None

    sort_keys = list(SortKey)
    selected_sort = st.sidebar.selectbox(
        "Sort by",
        options=sort_keys,
        index=sort_keys.index(state.sort),
        format_func=lambda key: SORT_LABELS[key],
    )
    if selected_sort is not state.sort:
        updated = with_sort(state, selected_sort)

    st.sidebar.markdown("#### Category")
    for category in options.categories:
        active = category.slug in state.categories
        if st.sidebar.checkbox(category.name, value=active, key=f"category-{category.slug}-{active}") != active:
            updated = toggle_category(state, category.slug)

    st.sidebar.markdown("#### Status")
    for status in options.statuses:
        active = status in state.statuses
        if st.sidebar.checkbox(status_label(status), value=active, key=f"status-{status.value}-{active}") != active:
            updated = toggle_status(state, status)

    st.sidebar.markdown("#### Source")
    for source in options.sources:
        active = source in state.sources
        if st.sidebar.checkbox(SOURCE_LABELS[source], value=active, key=f"source-{source.value}-{active}") != active:
            updated = toggle_source(state, source)

    if options.neighborhoods:
        st.sidebar.markdown("#### Neighborhood")
        for neighborhood in options.neighborhoods:
            active = neighborhood in state.neighborhoods
            if st.sidebar.checkbox(neighborhood, value=active, key=f"hood-{neighborhood}-{active}") != active:
                updated = toggle_neighborhood(state, neighborhood)

    if state.active_filter_count and st.sidebar.button("Clear filters"):
        updated = clear_filters()

    return updated


def render_project_card(project: Project, category: Optional[Category]) -> None:
    with st.container(border=True):
        st.markdown(_project_badges(project, category), unsafe_allow_html=True)
        st.markdown(f"#### {project.title}")
        if project.description:
            st.caption(project.description)
        if project.location_name:
            st.write(f"📍 {project.location_name}")
        st.write(
            f"▲ {project.vote_score} · 💬 {project.comment_count} · 👁 {project.follower_count}"
        )
        if st.button("View details", key=f"details-{project.id}"):
            navigate("detail", **{PROJECT_PARAM: project.id})


def render_projects_view(listing: ProjectListing, state: FilterState) -> None:
    st.markdown("### All Projects")
    st.caption("Explore transportation projects and community suggestions.")
    st.write(f"{listing.total} {pluralize(listing.total, 'project')}")

    if not listing.projects:
        if state.is_default:
            st.info("No projects yet. Be the first to suggest one.")
        else:
            st.info("No projects found. Try clearing some filters.")
            if st.button("Show all projects"):
                navigate("projects", clear_filters())
        return

    columns = st.columns(3)
    for index, project in enumerate(listing.projects):
        with columns[index % 3]:
            render_project_card(project, listing.categories_by_id.get(project.category_id or ""))

    if listing.page_count > 1:
        previous_col, label_col, next_col = st.columns([1, 2, 1])
        if listing.page > 1 and previous_col.button("Previous"):
            navigate("projects", with_page(state, listing.page - 1))
        label_col.write(f"Page {listing.page} of {listing.page_count}")
        if listing.page < listing.page_count and next_col.button("Next"):
            navigate("projects", with_page(state, listing.page + 1))


def render_map_view(
    use_cases: UseCases,
    listing: ProjectListing,
    config: AppConfig,
    today: date,
) -> None:
    st.markdown("### Project Map")
    markers = use_cases.map_markers.execute(
        listing.projects,
        listing.categories_by_id,
        today,
        next_dates=use_cases.store.next_dates(today),
    )
    st.caption(f"{len(markers)} of {listing.total} projects have a mapped location.")

    api_key = get_google_maps_api_key(config)
    if not api_key:
        st.info("Add a Google Maps key to the configuration file to display the interactive map.")
        if markers:
            st.map(
                pd.DataFrame(
                    [{"lat": marker.latitude, "lon": marker.longitude} for marker in markers]
                )
            )
        return

    maps_config = cast(MapsConfig, config.get("maps", {}))
    points = build_marker_points(
        markers,
        {project.id: project for project in listing.projects},
        listing.categories_by_id,
    )
    element_id = f"project-map-{uuid4().hex}"
    map_html = build_google_map_html(
        points,
        api_key=api_key,
        element_id=element_id,
        center=get_map_center(config),
        zoom=int(maps_config.get("zoom", 11) or 11),
    )
    components.html(map_html, height=540)


def render_detail_view(detail: Optional[ProjectDetail], today: date) -> None:
    if st.button("← Back to projects"):
        navigate("projects")

    if detail is None:
        st.error("Project not found.")
        return

    project = detail.project
    st.markdown(_project_badges(project, detail.category), unsafe_allow_html=True)
    st.caption(source_label(project.source, long=True))
    st.title(project.title)

    place = [value for value in (project.location_name, project.neighborhood) if value]
    if place:
        st.write(" · ".join(place))
    st.caption(f"Added {format_relative_time(project.created_at.date(), today)}")

    votes_col, comments_col, followers_col = st.columns(3)
    votes_col.metric("Votes", project.vote_score)
    comments_col.metric("Comments", project.comment_count)
    followers_col.metric("Following", project.follower_count)

    if project.description:
        st.markdown("#### Description")
        st.write(project.description)

    if project.affected_streets:
        st.markdown("#### Affected Area")
        st.write(project.affected_streets)

    if detail.upcoming_dates:
        st.markdown(f"#### Upcoming Dates & Deadlines ({len(detail.upcoming_dates)} upcoming)")
        for item in detail.upcoming_dates:
            background, color, border = URGENCY_COLORS[item.urgency]
            milestone = item.project_date
            body = [
                f"<strong>{html.escape(format_date(milestone.date))}</strong> · "
                f"{html.escape(date_type_label(milestone.date_type).upper())} · "
                f"{html.escape(URGENCY_LABELS[item.urgency])}",
                f"<div style='font-weight:600'>{html.escape(milestone.title)}</div>",
            ]
            if milestone.description:
                body.append(f"<div>{html.escape(milestone.description)}</div>")
            if milestone.url:
                body.append(f"<a href='{html.escape(milestone.url)}' target='_blank'>View Details</a>")
            st.markdown(
                f"<div style='border-left:4px solid {border};background:{background};color:{color};"
                f"padding:12px;border-radius:8px;margin-bottom:8px'>{''.join(body)}</div>",
                unsafe_allow_html=True,
            )

    if project.external_url:
        st.markdown("#### External Links")
        st.markdown(f"[Official Project Page]({project.external_url})")
        if project.external_id:
            st.caption(f"Project ID: {project.external_id}")


def render_suggest_view(use_cases: UseCases, auth: SessionAuthProvider, config: AppConfig) -> None:
    st.markdown("### Suggest a Project")
    st.caption("Propose an improvement for your neighborhood. Pick a location to place it on the map.")

    user = auth.current_user()
    if user is None:
        st.warning("Sign in from the sidebar to submit a suggestion.")

    categories = use_cases.store.list_categories()
    category_options: list[Optional[Category]] = [None, *categories]
    default_lat, default_lon = get_map_center(config)

    with st.form("suggest-form"):
        title = st.text_input("Title *")
        description = st.text_area("Description", height=140)
        category = st.selectbox(
            "Category",
            options=category_options,
            format_func=lambda item: item.name if item else "Select a category",
        )
        lat_col, lon_col = st.columns(2)
        latitude = lat_col.number_input(
            "Latitude *", value=0.0, format="%.6f", help=f"e.g. {default_lat:.4f}"
        )
        longitude = lon_col.number_input(
            "Longitude *", value=0.0, format="%.6f", help=f"e.g. {default_lon:.4f}"
        )
        location_name = st.text_input("Location name")
        affected_streets = st.text_input("Affected streets")
        neighborhood = st.text_input("Neighborhood")
        submitted = st.form_submit_button("Submit suggestion", use_container_width=True)

    if not submitted:
        return

    with st.spinner("Submitting suggestion..."):
        result = use_cases.suggest_project.execute(
            SuggestionInput(
                title=title,
                latitude=latitude,
                longitude=longitude,
                description=description,
                category_id=category.id if category else None,
                location_name=location_name,
                affected_streets=affected_streets,
                neighborhood=neighborhood,
            ),
            user,
        )

    if isinstance(result, SubmissionError):
        st.error(result.message)
        return

    st.success(f"Thanks! “{result.title}” was submitted for review.")
    st.markdown(f"[View your suggestion](?{VIEW_PARAM}=detail&{PROJECT_PARAM}={result.id})")


def main() -> None:
    st.set_page_config(page_title="Streetwise", layout="wide")

    config: AppConfig = load_app_config(PROJECT_ROOT / "configs" / "config.yaml")
    logging_config = cast(LoggingConfig, config.get("logging", {}))
    configure_logging(logging_config.get("level", "INFO"))

    use_cases = create_use_cases(config)
    auth = SessionAuthProvider(st.session_state)
    today = UrgencyClassifier().today()

    st.title("🚲 Streetwise")
    render_sidebar_auth(auth)

    view = st.query_params.get(VIEW_PARAM, "map")
    state = parse_filter_state(st.query_params)

    if view == "detail":
        project_id = st.query_params.get(PROJECT_PARAM, "")
        render_detail_view(use_cases.project_detail.execute(project_id, today), today)
        return

    view_keys = list(VIEWS)
    selected_view = st.radio(
        "View",
        options=view_keys,
        index=view_keys.index(view) if view in VIEWS else 0,
        format_func=lambda key: VIEWS[key],
        horizontal=True,
        label_visibility="collapsed",
    )
    if selected_view != view:
        navigate(selected_view, state)

    if selected_view == "suggest":
        render_suggest_view(use_cases, auth, config)
        return

    st.sidebar.markdown("### Filters")
    updated = render_filter_controls(state, use_cases.list_projects.filter_options())
    if updated is not None:
        navigate(selected_view, updated)

    if selected_view == "map":
        listing_config = cast(ListingConfig, config.get("listing", {}))
        listing = use_cases.list_projects.execute(state, paginate=False)
        limit = int(listing_config.get("map_limit", 100) or 100)
        listing = ProjectListing(
            projects=listing.projects[:limit],
            total=listing.total,
            page=1,
            page_size=limit,
            categories_by_id=listing.categories_by_id,
        )
        render_map_view(use_cases, listing, config, today)
        return

    render_projects_view(use_cases.list_projects.execute(state), state)


if __name__ == "__main__":
    main()
