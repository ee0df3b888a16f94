"""
Dish model - a contest entry
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from quilo_backend.database import Base
from quilo_backend.utils.helpers import utcnow


class Dish(Base):
    __tablename__ = "pratos"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    restaurant = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    region = Column(String, nullable=True)  # state the restaurant represents
    chef = Column(String, nullable=True)

    # Media
    image = Column(String, nullable=True)
    recipe_document = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    evaluations = relationship("Evaluation", back_populates="dish", lazy="noload", passive_deletes=True)
    recipes = relationship("Recipe", back_populates="dish", lazy="noload", passive_deletes=True)
