"""
Recipe model - the written recipe behind a contest dish
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from quilo_backend.database import Base
from quilo_backend.utils.helpers import utcnow


class Recipe(Base):
    __tablename__ = "receitas"

    id = Column(Integer, primary_key=True, index=True)
    dish_id = Column(Integer, ForeignKey("pratos.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)

    ingredients = Column(JSON, nullable=False, default=list)  # ["200g de frango", ...]
    steps = Column(JSON, nullable=False, default=list)
    prep_time_minutes = Column(Integer, nullable=True)
    servings = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)  # facil / medio / dificil
    document = Column(String, nullable=True)  # PDF reference

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    dish = relationship("Dish", back_populates="recipes", lazy="noload")
