"""
Wildwood Zoo Backend — Shared Service Helpers

Lookup-or-404 and patch application, used by every CRUD service so that the
not-found check always precedes a mutation.
"""

from typing import Any, Dict, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import Base
from wildwood.exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    object_id: int,
    resource: str,
) -> ModelT:
    obj = await db.get(model, object_id)
    if obj is None:
        raise NotFoundError(resource=resource, resource_id=object_id)
    return obj


def apply_changes(obj: Any, changes: Dict[str, Any]) -> None:
    for name, value in changes.items():
        setattr(obj, name, value)
