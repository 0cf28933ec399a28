from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import logging

from kit_inventory.exceptions import DashboardBusy, RemoteError, RecordNotFound
from kit_inventory.schemas.inspection import (
    InspectionCreate,
    Inspector,
    InspectionStatus,
    Location,
    RequestAmountUpdate,
    Unit,
    REQUEST_AMOUNT_CHOICES,
    ITEM_QUANTITY_CHOICES,
)
from kit_inventory.services.dashboard import Dashboard, get_dashboard
from kit_inventory.utils import success_resp, error_resp, load_error_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/inspections", tags=["inspections"])


# ----------------------------
# LIST / SEARCH
# ----------------------------
@router.get("")
def list_inspections(
    q: Optional[str] = Query(None, description="Search across all columns"),
    dashboard: Dashboard = Depends(get_dashboard),
):
    try:
        rows = dashboard.rows(q)
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except RemoteError:
        return load_error_resp(dashboard)

    data = {"rows": rows, "count": len(rows), "dashboard": dashboard.as_dict()}
    if not rows:
        return success_resp("No matching results found", data)
    return success_resp("Inspections fetched successfully", data)


@router.post("/reload")
def reload_inspections(dashboard: Dashboard = Depends(get_dashboard)):
    try:
        loaded = dashboard.load()
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    if not loaded:
        return load_error_resp(dashboard)
    return success_resp("Inspections reloaded", {"count": len(dashboard.inventory)})


@router.get("/options")
def get_options():
    """Choices for the table selectors and the edit dialog."""
    return success_resp("Options fetched successfully", {
        "units": [u.value for u in Unit],
        "locations": [loc.value for loc in Location],
        "inspectors": [i.value for i in Inspector],
        "statuses": [s.value for s in InspectionStatus],
        "request_amounts": REQUEST_AMOUNT_CHOICES,
        "item_quantities": ITEM_QUANTITY_CHOICES,
    })


@router.get("/{inspection_id}")
def get_inspection(inspection_id: int, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        dashboard.ensure_loaded()
        record = dashboard.inventory.get(inspection_id)
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except RemoteError:
        return load_error_resp(dashboard)
    except KeyError:
        return error_resp("Inspection not found", 404)
    return success_resp("Inspection fetched successfully", record)


# ----------------------------
# LOCAL REQUEST AMOUNT
# ----------------------------
@router.put("/{inspection_id}/request_amount")
def set_request_amount(
    inspection_id: int,
    payload: RequestAmountUpdate,
    dashboard: Dashboard = Depends(get_dashboard),
):
    try:
        record = dashboard.set_request_amount(inspection_id, payload.request_amount)
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except RemoteError:
        return load_error_resp(dashboard)
    except KeyError:
        return error_resp("Inspection not found", 404)
    return success_resp("Request amount updated", record)


# ----------------------------
# STORE PASSTHROUGH
# ----------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
def create_inspection(payload: InspectionCreate, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        record = dashboard.create_record(payload)
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except RemoteError as e:
        logger.error(f"Error creating inspection: {e}")
        return error_resp(f"Error creating inspection: {e.detail}", 502)
    return success_resp("Inspection created successfully", record, 201)


@router.delete("/{inspection_id}")
def delete_inspection(inspection_id: int, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        dashboard.delete_record(inspection_id)
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except RecordNotFound:
        return error_resp("Inspection not found", 404)
    except RemoteError as e:
        logger.error(f"Error deleting inspection {inspection_id}: {e}")
        return error_resp(f"Error deleting inspection: {e.detail}", 502)
    return success_resp("Inspection deleted successfully", {"inspection_id": inspection_id})
