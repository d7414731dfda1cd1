"""API routes for managing roles."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlalchemy.orm import Session, joinedload

from ..db import get_db
from ..db.models import Role as RoleModel
from ..db.models import User as UserModel
from ..schemas.message import Message
from ..schemas.role import Role, RoleIn
from ..schemas.user import User
from ..utils import is_storable_id, location_for, model_to_schema, models_to_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roles", tags=["Roles"])


def get_role_or_404(db: Session, role_id: int) -> RoleModel:
    """Load a role by primary key or raise a 404."""
    record = db.get(RoleModel, role_id) if is_storable_id(role_id) else None
    if record is None:
        raise HTTPException(status_code=404, detail=f"Role with ID {role_id} not found")
    return record


def ensure_role_name_available(db: Session, name: str, exclude_id: int | None = None):
    query = db.query(RoleModel).filter(RoleModel.name == name)
    if exclude_id is not None:
        query = query.filter(RoleModel.id != exclude_id)
    if query.first():
        logger.warning(f"Rejected duplicate role name '{name}'")
        raise HTTPException(
            status_code=400, detail=f"Role with name '{name}' already exists"
        )


@router.get(
    "",
    response_model=list[Role],
    operation_id="get_all_roles",
)
async def list_roles(db: Session = Depends(get_db)) -> list[Role]:
    """List all roles.

    Returns every role record in the order the database yields them.
    """
    records = db.query(RoleModel).all()
    return models_to_schema(records, Role)


@router.get(
    "/{role_id}",
    response_model=Role,
    operation_id="get_role_by_id",
)
async def get_role(
    role_id: int = Path(..., description="Role identifier"),
    db: Session = Depends(get_db),
) -> Role:
    """Fetch a single role by its identifier."""
    return model_to_schema(get_role_or_404(db, role_id), Role)


@router.get(
    "/{role_id}/users",
    response_model=list[User],
    operation_id="get_role_users",
)
async def list_role_users(
    role_id: int = Path(..., description="Role identifier"),
    db: Session = Depends(get_db),
) -> list[User]:
    """List the users that hold a role, each with the role resolved."""
    get_role_or_404(db, role_id)
    records = (
        db.query(UserModel)
        .options(joinedload(UserModel.role))
        .filter(UserModel.role_id == role_id)
        .all()
    )
    return models_to_schema(records, User)


@router.post(
    "",
    response_model=Role,
    status_code=201,
    operation_id="create_role",
)
async def create_role(
    role: RoleIn,
    response: Response,
    db: Session = Depends(get_db),
) -> Role:
    """Create a role.

    Role names are unique; a name that is already taken is rejected with a 400.
    The response carries a Location header pointing at the new role.
    """
    ensure_role_name_available(db, role.name)

    record = RoleModel(name=role.name, description=role.description)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(f"Created role {record.id} ('{record.name}')")

    response.headers["Location"] = location_for("roles", record.id)
    return model_to_schema(record, Role)


@router.put(
    "/{role_id}",
    response_model=Role,
    operation_id="update_role",
)
async def update_role(
    role: RoleIn,
    role_id: int = Path(..., description="Role identifier"),
    db: Session = Depends(get_db),
) -> Role:
    """Replace the name and description of an existing role."""
    record = get_role_or_404(db, role_id)
    ensure_role_name_available(db, role.name, exclude_id=role_id)

    record.name = role.name
    record.description = role.description
    db.commit()
    db.refresh(record)
    logger.info(f"Updated role {record.id}")
    return model_to_schema(record, Role)


@router.delete(
    "/{role_id}",
    response_model=Message,
    operation_id="delete_role",
)
async def delete_role(
    role_id: int = Path(..., description="Role identifier"),
    db: Session = Depends(get_db),
) -> Message:
    """Delete a role.

    A role that is still assigned to users cannot be deleted; the request is
    rejected with a 409 and the users are left untouched.
    """
    record = get_role_or_404(db, role_id)

    # Check if any users are assigned this role
    users_with_role = db.query(UserModel).filter(UserModel.role_id == role_id).count()
    if users_with_role > 0:
        logger.warning(
            f"Refused to delete role {role_id}: {users_with_role} user(s) assigned"
        )
        raise HTTPException(
            status_code=409,
            detail=(
                f"Role '{record.name}' cannot be deleted: "
                f"{users_with_role} user(s) are still assigned to it"
            ),
        )

    name = record.name
    db.delete(record)
    db.commit()
    logger.info(f"Deleted role {role_id} ('{name}')")
    return Message(message=f"Role '{name}' deleted successfully")
