"""SQLAlchemy ORM models for persisted simulations"""

import uuid
from sqlalchemy import Column, Integer, DateTime, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class InvestmentSimulation(Base):
    """Saved simulation, retrievable by reference number"""

    __tablename__ = "investment_simulations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_email = Column(Text, nullable=False, index=True)
    reference_number = Column(Text, nullable=False, unique=True, index=True)
    simulation_data = Column(JSON, nullable=False)
    analysis_results = Column(JSON, nullable=True)
    profile_status = Column(Text, nullable=False, default="not_started")
    profile_step = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
