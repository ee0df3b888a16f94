"""
Evaluation model - one judge's score for one dish under one criterion
"""
from enum import Enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from quilo_backend.database import Base
from quilo_backend.utils.helpers import utcnow


class Criterion(str, Enum):
    ORIGINALIDADE = "originalidade"
    RECEITA = "receita"
    APRESENTACAO = "apresentacao"
    HARMONIA = "harmonia"
    SABOR = "sabor"
    ADEQUACAO = "adequacao"


# Contest-defined weights; they sum to 13
CRITERION_WEIGHTS = {
    Criterion.ORIGINALIDADE: 2,
    Criterion.RECEITA: 3,
    Criterion.APRESENTACAO: 2,
    Criterion.HARMONIA: 2,
    Criterion.SABOR: 3,
    Criterion.ADEQUACAO: 1,
}

TOTAL_WEIGHT = sum(CRITERION_WEIGHTS.values())

# Labels for display
CRITERION_LABELS = {
    Criterion.ORIGINALIDADE: "Originalidade",
    Criterion.RECEITA: "Fidelidade à receita",
    Criterion.APRESENTACAO: "Apresentação",
    Criterion.HARMONIA: "Harmonia",
    Criterion.SABOR: "Sabor",
    Criterion.ADEQUACAO: "Adequação à categoria",
}


class Evaluation(Base):
    __tablename__ = "avaliacoes"

    id = Column(Integer, primary_key=True, index=True)
    judge_id = Column(Integer, ForeignKey("jurados.id", ondelete="CASCADE"), nullable=False, index=True)
    dish_id = Column(Integer, ForeignKey("pratos.id", ondelete="CASCADE"), nullable=False, index=True)
    criterion = Column(
        SQLEnum(
            Criterion,
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )
    score = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    judge = relationship("Judge", back_populates="evaluations", lazy="noload")
    dish = relationship("Dish", back_populates="evaluations", lazy="noload")

    __table_args__ = (
        UniqueConstraint("judge_id", "dish_id", "criterion", name="uq_avaliacao_jurado_prato_criterio"),
    )
