"""
Tenant ownership check shared by use cases and the HTTP ownership dependency.

A record that exists but belongs to another firm is reported exactly like a
missing one.
"""
from typing import TypeVar

from sqlalchemy.orm import Session

from studiodesk.application.errors import NotFoundError

ModelT = TypeVar("ModelT")


def entity_name(model: type) -> str:
    """EventModel -> "Event", User -> "User"."""
    name = model.__name__
    return name[:-len("Model")] if name.endswith("Model") else name


def load_owned(db: Session, model: type[ModelT], record_id: int, firm_id: int) -> ModelT:
    record = db.get(model, record_id)
    if record is None or record.firm_id != firm_id:
        raise NotFoundError.for_entity(entity_name(model))
    return record
