from fastapi import APIRouter, Depends
import logging

from kit_inventory.exceptions import DashboardBusy, EditorStateError, RemoteError
from kit_inventory.schemas.inspection import InspectionEdit
from kit_inventory.services.dashboard import Dashboard, get_dashboard
from kit_inventory.services.record_editor import SAVE_ERROR, SAVE_SUCCESS
from kit_inventory.utils import success_resp, error_resp, load_error_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/editor", tags=["editor"])


@router.get("")
def get_editor(dashboard: Dashboard = Depends(get_dashboard)):
    return success_resp("Editor state fetched", dashboard.editor.as_dict())


@router.post("/select/{inspection_id}")
def select_inspection(inspection_id: int, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        dashboard.select(inspection_id)
    except (DashboardBusy, EditorStateError) as e:
        return error_resp(str(e), 409, dashboard.editor.as_dict())
    except RemoteError:
        return load_error_resp(dashboard)
    except KeyError:
        return error_resp("Inspection not found", 404)
    return success_resp("Inspection selected", dashboard.editor.as_dict())


@router.patch("")
def edit_inspection(payload: InspectionEdit, dashboard: Dashboard = Depends(get_dashboard)):
    # explicit nulls are ignored; every record field is required
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    try:
        dashboard.editor.edit(changes)
    except EditorStateError as e:
        return error_resp(str(e), 409, dashboard.editor.as_dict())
    except ValueError as e:
        return error_resp(f"Invalid field value: {e}", 422, dashboard.editor.as_dict())
    return success_resp("Working copy updated", dashboard.editor.as_dict())


@router.post("/save")
def save_inspection(dashboard: Dashboard = Depends(get_dashboard)):
    try:
        saved = dashboard.save_edit()
    except (DashboardBusy, EditorStateError) as e:
        return error_resp(str(e), 409, dashboard.editor.as_dict())
    if not saved:
        return error_resp(SAVE_ERROR, 502, dashboard.editor.as_dict())
    return success_resp(SAVE_SUCCESS, dashboard.editor.as_dict())


@router.post("/cancel")
def cancel_edit(dashboard: Dashboard = Depends(get_dashboard)):
    try:
        dashboard.editor.cancel()
    except EditorStateError as e:
        return error_resp(str(e), 409, dashboard.editor.as_dict())
    return success_resp("Changes discarded", dashboard.editor.as_dict())


@router.post("/close")
def close_editor(dashboard: Dashboard = Depends(get_dashboard)):
    try:
        dashboard.editor.close()
    except EditorStateError as e:
        return error_resp(str(e), 409, dashboard.editor.as_dict())
    return success_resp("Editor closed", dashboard.editor.as_dict())
