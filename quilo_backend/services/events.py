"""
Change events returned by every mutation.

Services never talk to the live-update transport directly: they return the
events describing what changed, and the route hands them to the notifier once
the transaction has committed.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ChangeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    RANKING_CHANGED = "ranking_changed"


class Resource(str, Enum):
    DISHES = "pratos"
    JUDGES = "jurados"
    EVALUATIONS = "avaliacoes"
    RECIPES = "receitas"
    RANKING = "ranking"


# Socket event prefix for a single record of each resource
SINGULAR_NAMES = {
    Resource.DISHES: "prato",
    Resource.JUDGES: "jurado",
    Resource.EVALUATIONS: "avaliacao",
    Resource.RECIPES: "receita",
}


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    resource: Resource
    # ORM record for created/updated, identifying keys for deleted
    payload: Any = None


def entity_created(resource: Resource, record) -> ChangeEvent:
    return ChangeEvent(ChangeKind.CREATED, resource, record)


def entity_updated(resource: Resource, record) -> ChangeEvent:
    return ChangeEvent(ChangeKind.UPDATED, resource, record)


def entity_deleted(resource: Resource, **keys) -> ChangeEvent:
    return ChangeEvent(ChangeKind.DELETED, resource, keys)


def ranking_changed() -> ChangeEvent:
    return ChangeEvent(ChangeKind.RANKING_CHANGED, Resource.RANKING)


@dataclass
class MutationResult:
    """A mutated record together with the events it produced"""

    record: Any
    events: list[ChangeEvent] = field(default_factory=list)
    created: bool = False
