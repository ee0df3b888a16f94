"""
Judge model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from quilo_backend.database import Base
from quilo_backend.utils.helpers import utcnow


class Judge(Base):
    __tablename__ = "jurados"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String, nullable=True)
    specialty = Column(String, nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)

    evaluations = relationship("Evaluation", back_populates="judge", lazy="noload", passive_deletes=True)
