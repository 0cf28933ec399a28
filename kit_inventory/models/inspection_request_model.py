from sqlalchemy import Column, Integer, String, Text, DateTime, func

from kit_inventory.database import Base


class InspectionRequest(Base):
    """Model for inspections_request table - one restock line item per row.

    Rows are written once per submitted batch and never updated. ``id`` is
    only the row identity; a batch is the set of rows sharing
    ``request_order_number``.
    """
    __tablename__ = "inspections_request"

    id = Column(Integer, primary_key=True, autoincrement=True)
    inspection_id = Column(Integer, nullable=False, index=True)  # FK to inspections.inspection_id
    request_order_number = Column(String(16), nullable=False, index=True)  # zero-padded, e.g. "0007"
    request_amount = Column(Integer, nullable=False)
    picture_url = Column(String(512), nullable=True)
    item_inspected = Column(String(255), nullable=True)
    unit = Column(String(16), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
