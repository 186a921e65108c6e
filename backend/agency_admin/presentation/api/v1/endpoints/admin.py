"""Admin list-management endpoints.

Every list screen (users, posts, categories, SEO pages) is served by the
same routes. A request only calls operations of the caller's
`AdminWorkspace`; it never reaches a gateway directly.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status

from agency_admin.application.schemas import (
    BulkActionRequest,
    BulkFailureSchema,
    BulkOutcomeResponse,
    CollectionViewResponse,
    DashboardStatsResponse,
    NotificationSchema,
)
from agency_admin.application.services import AdminWorkspace, CollectionView
from agency_admin.application.services.bulk_action_executor import BulkAction
from agency_admin.application.services.filtering import FilterPredicate
from agency_admin.domain.entities import MutationResult
from agency_admin.infrastructure.dependencies import get_admin_workspace

router = APIRouter(prefix="/admin", tags=["Admin"])

_FAILURE_STATUS = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "gateway": status.HTTP_502_BAD_GATEWAY,
}


def _get_view(workspace: AdminWorkspace, collection: str) -> CollectionView:
    try:
        return workspace.view(collection)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown collection '{collection}'",
        )


def _serialize(view: CollectionView, entity: Any) -> dict[str, Any]:
    return view.response_schema.model_validate(entity, from_attributes=True).model_dump(mode="json")


def _render(view: CollectionView) -> CollectionViewResponse:
    store, selection = view.store, view.selection
    visible = selection.visible(store.items)
    visible_ids = [entity.id for entity in visible]
    return CollectionViewResponse(
        items=[_serialize(view, entity) for entity in visible],
        total=len(store),
        visible_count=len(visible),
        selected_ids=sorted(selection.selected),
        select_all_state=selection.select_all_state(visible_ids).value,
        state=store.state.value,
        stale=store.stale,
        error=store.error,
    )


def _raise_for(result: MutationResult) -> None:
    if not result.success:
        raise HTTPException(
            status_code=_FAILURE_STATUS.get(result.reason or "gateway", status.HTTP_502_BAD_GATEWAY),
            detail=result.error,
        )


# ── Workspace-wide ───────────────────────────────────────────────────


@router.get("/notifications", response_model=list[NotificationSchema])
async def drain_notifications(
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> list[NotificationSchema]:
    """Return and clear the pending toast messages."""
    return [NotificationSchema.model_validate(n) for n in workspace.notifications.drain()]


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> DashboardStatsResponse:
    """Overview numbers aggregated from the loaded collections."""
    await workspace.ensure_all_loaded()
    return DashboardStatsResponse.model_validate(workspace.stats.compute(), from_attributes=True)


# ── Selection ────────────────────────────────────────────────────────


@router.post("/{collection}/selection", response_model=CollectionViewResponse)
async def select_all_visible(
    collection: str,
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> CollectionViewResponse:
    """Select exactly the rows visible under the active filter."""
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    view.selection.select_all(entity.id for entity in view.selection.visible(view.store.items))
    return _render(view)


@router.delete("/{collection}/selection", response_model=CollectionViewResponse)
async def clear_selection(
    collection: str,
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> CollectionViewResponse:
    view = _get_view(workspace, collection)
    view.selection.clear()
    return _render(view)


@router.post("/{collection}/selection/{entity_id}", response_model=CollectionViewResponse)
async def toggle_selection(
    collection: str,
    entity_id: str,
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> CollectionViewResponse:
    """Check or uncheck one row."""
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    if view.store.get(entity_id) is None and not view.selection.is_selected(entity_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{view.store.entity_label} with id '{entity_id}' not found",
        )
    view.selection.toggle_select(entity_id)
    return _render(view)


@router.post("/{collection}/bulk", response_model=BulkOutcomeResponse)
async def run_bulk_action(
    collection: str,
    data: BulkActionRequest,
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> BulkOutcomeResponse:
    """Apply one action to every selected row. Failed rows stay selected."""
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    outcome = await view.executor.execute(BulkAction(kind=data.action, fields=data.fields))
    return BulkOutcomeResponse(
        success_count=outcome.success_count,
        failure_count=outcome.failure_count,
        errors=[BulkFailureSchema(id=f.id, error=f.error) for f in outcome.errors],
        payload=outcome.payload,
        selected_ids=sorted(view.selection.selected),
    )


# ── Collection CRUD ──────────────────────────────────────────────────


@router.get("/{collection}", response_model=CollectionViewResponse)
async def list_collection(
    collection: str,
    request: Request,
    search: str = Query("", description="Case-insensitive text search"),
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> CollectionViewResponse:
    """Visible rows under the given filter, plus selection and loading state.

    Any query parameter named after one of the collection's filter fields
    is applied as an equality constraint; `all` or an empty value means
    no constraint.
    """
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    constraints = {
        name: request.query_params[name]
        for name in view.filter_fields
        if name in request.query_params
    }
    view.selection.set_filter(FilterPredicate(search=search, constraints=constraints))
    return _render(view)


@router.post("/{collection}/reload", response_model=CollectionViewResponse)
async def reload_collection(
    collection: str,
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> CollectionViewResponse:
    """Fetch the collection again. A failed reload keeps the previous rows, marked stale."""
    view = _get_view(workspace, collection)
    await view.store.load()
    return _render(view)


@router.post("/{collection}", status_code=status.HTTP_201_CREATED)
async def create_entity(
    collection: str,
    fields: dict[str, Any] = Body(...),
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> dict[str, Any]:
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    result = await view.store.create(fields)
    _raise_for(result)
    return _serialize(view, result.data)


@router.patch("/{collection}/{entity_id}")
async def update_entity(
    collection: str,
    entity_id: str,
    fields: dict[str, Any] = Body(...),
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> dict[str, Any]:
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    result = await view.store.update(entity_id, fields)
    _raise_for(result)
    return _serialize(view, result.data)


@router.delete("/{collection}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entity(
    collection: str,
    entity_id: str,
    workspace: AdminWorkspace = Depends(get_admin_workspace),
) -> None:
    view = _get_view(workspace, collection)
    await view.ensure_loaded()
    _raise_for(await view.store.remove(entity_id))
