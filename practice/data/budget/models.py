"""Budget models - NDIS funding plans, their line items and the item catalog."""
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Boolean, Integer, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import generate_id


class BudgetSettings(Base):
    """A funding plan for a client. Only one plan per client is active at a time."""

    __tablename__ = "budget_settings"

    id = Column(String, primary_key=True, default=lambda: generate_id("plan"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    plan_serial_number = Column(String, nullable=True)
    plan_code = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    ndis_funds = Column(Numeric(precision=15, scale=2), nullable=False, default=0)

    # Plan period - start falls back to created_at
    start_date = Column(Date, nullable=True)
    end_of_plan = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", back_populates="budget_settings")
    items = relationship("BudgetItem", back_populates="budget_settings", passive_deletes=True)


class BudgetItem(Base):
    """A funded service or product line within a plan."""

    __tablename__ = "budget_items"

    id = Column(String, primary_key=True, default=lambda: generate_id("item"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    budget_settings_id = Column(
        String, ForeignKey("budget_settings.id", ondelete="CASCADE"), nullable=False, index=True
    )

    item_code = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    description = Column(String, nullable=False)
    unit_price = Column(Numeric(precision=12, scale=2), nullable=False)
    quantity = Column(Integer, nullable=False)
    used_quantity = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    budget_settings = relationship("BudgetSettings", back_populates="items")


class BudgetItemCatalog(Base):
    """Predefined items that can be added to any plan."""

    __tablename__ = "budget_item_catalog"

    id = Column(String, primary_key=True, default=lambda: generate_id("catalog"))
    item_code = Column(String, nullable=False, unique=True, index=True)
    description = Column(String, nullable=False)
    default_unit_price = Column(Numeric(precision=12, scale=2), nullable=False)
    category = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
