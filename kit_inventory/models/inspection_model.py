"""
SQLAlchemy model for the inspections table.
One row per tracked first-aid item or kit, with its stock level, expiry and
inspection schedule.
"""

from sqlalchemy import Column, Integer, String, Text, Date

from kit_inventory.database import Base


class Inspection(Base):
    __tablename__ = "inspections"

    # Primary key (assigned by the store)
    inspection_id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    picture_url = Column(String(512), nullable=False, default="")
    item_inspected = Column(String(255), nullable=False)
    item_quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(16), nullable=False)
    expiry_date = Column(Date, nullable=False)

    # How many to reorder; cleared once a request batch is submitted
    request_amount = Column(Integer, nullable=False, default=0)

    location = Column(String(64), nullable=False)
    inspection_date = Column(Date, nullable=False)
    inspected_by = Column(String(100), nullable=False)
    kit_condition = Column(String(255), nullable=False, default="")
    next_inspection_date = Column(Date, nullable=False)
    status = Column(String(32), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    def __repr__(self):
        return (
            f"<Inspection(inspection_id={self.inspection_id}, "
            f"item_inspected='{self.item_inspected}', "
            f"request_amount={self.request_amount})>"
        )
