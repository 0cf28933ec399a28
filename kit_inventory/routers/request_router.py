from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from io import BytesIO
import logging

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment

from kit_inventory.exceptions import DashboardBusy, RemoteError, ValidationGap
from kit_inventory.services.dashboard import Dashboard, get_dashboard
from kit_inventory.services.request_compiler import PREVIEW_ERROR, SUBMIT_ERROR, SUBMIT_SUCCESS
from kit_inventory.utils import success_resp, error_resp, load_error_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/requests", tags=["requests"])

EXPORT_HEADERS = ["Order Number", "Item ID", "Item Inspected", "Request Amount", "Unit", "Description", "Picture URL"]
EXPORT_WIDTHS = [15, 10, 30, 16, 10, 40, 40]


@router.post("/preview")
def preview_request(dashboard: Dashboard = Depends(get_dashboard)):
    try:
        candidates = dashboard.preview_request()
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except RemoteError:
        return load_error_resp(dashboard)
    except ValidationGap as e:
        return error_resp(str(e), 400, dashboard.as_dict())
    if not candidates:
        return error_resp(PREVIEW_ERROR, 502, dashboard.as_dict())
    return success_resp("Request list ready for review", {"items": candidates, "count": len(candidates)})


@router.get("/preview")
def get_preview(dashboard: Dashboard = Depends(get_dashboard)):
    candidates = dashboard.compiler.candidates
    return success_resp("Request list fetched", {
        "reviewing": dashboard.compiler.reviewing,
        "items": candidates,
        "count": len(candidates),
    })


@router.post("/submit")
def submit_request(dashboard: Dashboard = Depends(get_dashboard)):
    try:
        order_number = dashboard.submit_request()
    except DashboardBusy as e:
        return error_resp(str(e), 409)
    except ValidationGap as e:
        return error_resp(str(e), 400, dashboard.as_dict())
    if order_number is None:
        return error_resp(SUBMIT_ERROR, 502, dashboard.as_dict())
    return success_resp(SUBMIT_SUCCESS, {"request_order_number": order_number})


@router.post("/dismiss")
def dismiss_request(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.compiler.dismiss()
    return success_resp("Request review closed", dashboard.as_dict())


@router.get("/{order_number}")
def get_request_batch(order_number: str, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        items = dashboard.request_batch(order_number)
    except RemoteError as e:
        return error_resp(f"Error fetching request {order_number}: {e.detail}", 502)
    if not items:
        return error_resp("Request not found", 404)
    return success_resp("Request fetched successfully", {
        "request_order_number": order_number,
        "items": items,
    })


@router.get("/{order_number}/export")
def export_request_batch(order_number: str, dashboard: Dashboard = Depends(get_dashboard)):
    """Export one submitted request batch to an Excel sheet"""
    try:
        items = dashboard.request_batch(order_number)
    except RemoteError as e:
        return error_resp(f"Error fetching request {order_number}: {e.detail}", 502)
    if not items:
        return error_resp("Request not found", 404)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = f"Request {order_number}"
    ws.append(EXPORT_HEADERS)

    # Style header row
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    for item in items:
        ws.append([
            item.request_order_number,
            item.inspection_id,
            item.item_inspected,
            item.request_amount,
            item.unit,
            item.description,
            item.picture_url,
        ])

    for i, width in enumerate(EXPORT_WIDTHS, 1):
        ws.column_dimensions[openpyxl.utils.get_column_letter(i)].width = width

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    filename = f"request_{order_number}.xlsx"
    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
