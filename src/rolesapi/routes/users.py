"""API routes for managing users."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlalchemy.orm import Session, joinedload

from ..db import get_db
from ..db.models import Role as RoleModel
from ..db.models import User as UserModel
from ..schemas.message import Message
from ..schemas.user import User, UserIn
from ..utils import is_storable_id, location_for, model_to_schema, models_to_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def _with_role(db: Session):
    return db.query(UserModel).options(joinedload(UserModel.role))


def load_user_with_role(db: Session, user_id: int) -> UserModel | None:
    """Load a user with its role, refreshing anything already in the session."""
    return (
        _with_role(db)
        .populate_existing()
        .filter(UserModel.id == user_id)
        .first()
    )


def get_user_or_404(db: Session, user_id: int, with_role: bool = False) -> UserModel:
    """Load a user by primary key or raise a 404."""
    record = None
    if is_storable_id(user_id):
        if with_role:
            record = load_user_with_role(db, user_id)
        else:
            record = db.get(UserModel, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
    return record


def validate_user(db: Session, user: UserIn, exclude_id: int | None = None):
    """Check the role reference and email uniqueness before a write.

    The role is checked first, so a payload with both problems reports the
    missing role.
    """
    role_exists = is_storable_id(user.role_id) and (
        db.query(RoleModel.id).filter(RoleModel.id == user.role_id).first()
    )
    if not role_exists:
        logger.warning(f"Rejected user write: role {user.role_id} does not exist")
        raise HTTPException(
            status_code=400, detail=f"Role with ID {user.role_id} does not exist"
        )

    query = db.query(UserModel.id).filter(UserModel.email == user.email)
    if exclude_id is not None:
        query = query.filter(UserModel.id != exclude_id)
    if query.first():
        logger.warning(f"Rejected user write: email '{user.email}' already in use")
        raise HTTPException(
            status_code=400, detail=f"User with email '{user.email}' already exists"
        )


@router.get(
    "",
    response_model=list[User],
    operation_id="get_all_users",
)
async def list_users(db: Session = Depends(get_db)) -> list[User]:
    """List users in the system.

    Every user is returned with its role resolved.
    """
    records = _with_role(db).all()
    return models_to_schema(records, User)


@router.get(
    "/{user_id}",
    response_model=User,
    operation_id="get_user_by_id",
)
async def get_user(
    user_id: int = Path(..., description="User identifier"),
    db: Session = Depends(get_db),
) -> User:
    """Fetch a single user and its role."""
    return model_to_schema(get_user_or_404(db, user_id, with_role=True), User)


@router.post(
    "",
    response_model=User,
    status_code=201,
    operation_id="create_user",
)
async def create_user(
    user: UserIn,
    response: Response,
    db: Session = Depends(get_db),
) -> User:
    """Create a user entry.

    The referenced role must exist and the email must not belong to another
    user. The created user is returned with its role resolved.
    """
    validate_user(db, user)

    record = UserModel(
        email=user.email, phone_number=user.phone_number, role_id=user.role_id
    )
    db.add(record)
    db.commit()
    logger.info(f"Created user {record.id} ('{record.email}')")

    created = load_user_with_role(db, record.id)
    response.headers["Location"] = location_for("users", record.id)
    return model_to_schema(created, User)


@router.put(
    "/{user_id}",
    response_model=User,
    operation_id="update_user",
)
async def update_user(
    user: UserIn,
    user_id: int = Path(..., description="User identifier"),
    db: Session = Depends(get_db),
) -> User:
    """Replace a user's email, phone number and role.

    Keeping the current email is allowed; taking another user's is not.
    """
    record = get_user_or_404(db, user_id)

    validate_user(db, user, exclude_id=user_id)

    record.email = user.email
    record.phone_number = user.phone_number
    record.role_id = user.role_id
    db.commit()
    logger.info(f"Updated user {user_id}")

    return model_to_schema(load_user_with_role(db, user_id), User)


@router.delete(
    "/{user_id}",
    response_model=Message,
    operation_id="delete_user",
)
async def delete_user(
    user_id: int = Path(..., description="User identifier"),
    db: Session = Depends(get_db),
) -> Message:
    """Delete a user."""
    user_record = get_user_or_404(db, user_id)

    email = user_record.email
    db.delete(user_record)
    db.commit()
    logger.info(f"Deleted user {user_id}")
    return Message(message=f"User with email '{email}' deleted successfully")
