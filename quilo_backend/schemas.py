"""
Request/response schemas shared by the HTTP routes and the live-update channel.

Request bodies use English field names; the Portuguese names sent by the
contest front-end (nome, restaurante, prato_id, nota, ...) are
accepted as aliases.
"""
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, AliasChoices, Field, field_validator

from quilo_backend.models.evaluation import Criterion

T = TypeVar("T")


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _required(value):
    """Partial updates may omit a required field but not set it to null"""
    if value is None:
        raise ValueError("Este campo não pode ser nulo")
    return value


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: List[T]
    total: int


class ItemEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: Optional[str] = None


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


# ---------------------------------------------------------------------------
# Dishes
# ---------------------------------------------------------------------------

class DishResponse(BaseModel):
    id: int
    name: str
    restaurant: str
    description: Optional[str] = None
    region: Optional[str] = None
    chef: Optional[str] = None
    image: Optional[str] = None
    recipe_document: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DishCreate(BaseModel):
    name: str = Field(min_length=1, validation_alias=_alias("name", "nome"))
    restaurant: str = Field(min_length=1, validation_alias=_alias("restaurant", "restaurante"))
    description: Optional[str] = Field(None, validation_alias=_alias("description", "descricao"))
    region: Optional[str] = Field(None, validation_alias=_alias("region", "estado"))
    chef: Optional[str] = None
    image: Optional[str] = Field(None, validation_alias=_alias("image", "imagem"))
    recipe_document: Optional[str] = Field(None, validation_alias=_alias("recipe_document", "receita_pdf"))


class DishUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, validation_alias=_alias("name", "nome"))
    restaurant: Optional[str] = Field(None, min_length=1, validation_alias=_alias("restaurant", "restaurante"))
    description: Optional[str] = Field(None, validation_alias=_alias("description", "descricao"))
    region: Optional[str] = Field(None, validation_alias=_alias("region", "estado"))
    chef: Optional[str] = None
    image: Optional[str] = Field(None, validation_alias=_alias("image", "imagem"))
    recipe_document: Optional[str] = Field(None, validation_alias=_alias("recipe_document", "receita_pdf"))

    @field_validator("name", "restaurant")
    @classmethod
    def not_null(cls, value):
        return _required(value)


# ---------------------------------------------------------------------------
# Judges
# ---------------------------------------------------------------------------

class JudgeResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    specialty: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JudgeCreate(BaseModel):
    name: str = Field(min_length=1, validation_alias=_alias("name", "nome"))
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = Field(None, validation_alias=_alias("phone", "telefone"))
    specialty: Optional[str] = Field(None, validation_alias=_alias("specialty", "especialidade"))
    is_active: bool = Field(True, validation_alias=_alias("is_active", "ativo"))


class JudgeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, validation_alias=_alias("name", "nome"))
    email: Optional[str] = Field(None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = Field(None, validation_alias=_alias("phone", "telefone"))
    specialty: Optional[str] = Field(None, validation_alias=_alias("specialty", "especialidade"))
    is_active: Optional[bool] = Field(None, validation_alias=_alias("is_active", "ativo"))

    @field_validator("name", "email", "is_active")
    @classmethod
    def not_null(cls, value):
        return _required(value)


# ---------------------------------------------------------------------------
# Evaluations
# ---------------------------------------------------------------------------

class EvaluationResponse(BaseModel):
    id: int
    judge_id: int
    dish_id: int
    criterion: str
    score: int
    judge_name: Optional[str] = None
    dish_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EvaluationEnvelope(BaseModel):
    success: bool = True
    data: EvaluationResponse
    message: str
    created: bool


class EvaluationSheetEnvelope(BaseModel):
    success: bool = True
    data: List[EvaluationResponse]
    total: int
    message: str
    created: bool


class EvaluationSubmit(BaseModel):
    judge_id: int = Field(validation_alias=_alias("judge_id", "jurado_id"))
    dish_id: int = Field(validation_alias=_alias("dish_id", "prato_id"))
    # Range and enum checks happen in the service so they answer 400, not 422
    criterion: str = Field(validation_alias=_alias("criterion", "criterio"))
    score: int = Field(validation_alias=_alias("score", "nota"))


class EvaluationSheetSubmit(BaseModel):
    judge_id: int = Field(validation_alias=_alias("judge_id", "jurado_id"))
    dish_id: int = Field(validation_alias=_alias("dish_id", "prato_id"))
    scores: dict[str, int] = Field(validation_alias=_alias("scores", "notas"))


class CriterionResponse(BaseModel):
    value: str
    label: str
    weight: int


class CriteriaResponse(BaseModel):
    success: bool = True
    data: List[CriterionResponse]
    total_weight: int
    score_min: int
    score_max: int


# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------

def _as_lines(value):
    """Accept a newline-separated string where a list of lines is expected"""
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return value


class RecipeResponse(BaseModel):
    id: int
    dish_id: int
    title: str
    ingredients: List[str] = []
    steps: List[str] = []
    prep_time_minutes: Optional[int] = None
    servings: Optional[str] = None
    difficulty: Optional[str] = None
    document: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecipeCreate(BaseModel):
    dish_id: int = Field(validation_alias=_alias("dish_id", "prato_id"))
    title: str = Field(min_length=1, validation_alias=_alias("title", "titulo"))
    ingredients: List[str] = Field(default_factory=list, validation_alias=_alias("ingredients", "ingredientes"))
    steps: List[str] = Field(default_factory=list, validation_alias=_alias("steps", "modo_preparo"))
    prep_time_minutes: Optional[int] = Field(None, ge=0, validation_alias=_alias("prep_time_minutes", "tempo_preparo"))
    servings: Optional[str] = Field(None, validation_alias=_alias("servings", "rendimento"))
    difficulty: Optional[str] = Field(None, validation_alias=_alias("difficulty", "dificuldade"))
    document: Optional[str] = Field(None, validation_alias=_alias("document", "arquivo_pdf"))

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def split_lines(cls, value):
        return _as_lines(value)


class RecipeUpdate(BaseModel):
    dish_id: Optional[int] = Field(None, validation_alias=_alias("dish_id", "prato_id"))
    title: Optional[str] = Field(None, min_length=1, validation_alias=_alias("title", "titulo"))
    ingredients: Optional[List[str]] = Field(None, validation_alias=_alias("ingredients", "ingredientes"))
    steps: Optional[List[str]] = Field(None, validation_alias=_alias("steps", "modo_preparo"))
    prep_time_minutes: Optional[int] = Field(None, ge=0, validation_alias=_alias("prep_time_minutes", "tempo_preparo"))
    servings: Optional[str] = Field(None, validation_alias=_alias("servings", "rendimento"))
    difficulty: Optional[str] = Field(None, validation_alias=_alias("difficulty", "dificuldade"))
    document: Optional[str] = Field(None, validation_alias=_alias("document", "arquivo_pdf"))

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def split_lines(cls, value):
        return _as_lines(value)

    @field_validator("dish_id", "title", "ingredients", "steps")
    @classmethod
    def not_null(cls, value):
        return _required(value)


# ---------------------------------------------------------------------------
# Ranking & statistics
# ---------------------------------------------------------------------------

class RankingEntryResponse(BaseModel):
    position: int
    dish_id: int
    name: str
    restaurant: str
    chef: Optional[str] = None
    region: Optional[str] = None
    image: Optional[str] = None
    criteria: dict[str, float]
    total_judges: int
    total_evaluations: int
    weighted_total: float
    final_score: float

    class Config:
        from_attributes = True


class StatisticsResponse(BaseModel):
    dish_count: int
    active_judge_count: int
    evaluation_count: int
    recipe_count: int
    timestamp: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Serializers
# ---------------------------------------------------------------------------

def serialize_evaluation(evaluation) -> EvaluationResponse:
    judge = evaluation.judge
    dish = evaluation.dish
    return EvaluationResponse(
        id=evaluation.id,
        judge_id=evaluation.judge_id,
        dish_id=evaluation.dish_id,
        criterion=Criterion(evaluation.criterion).value,
        score=evaluation.score,
        judge_name=judge.name if judge else None,
        dish_name=dish.name if dish else None,
        created_at=evaluation.created_at,
        updated_at=evaluation.updated_at,
    )
