"""Store-level constraints on the roles and users tables."""

import pytest
from sqlalchemy.exc import IntegrityError

from rolesapi.db.models import Role, User


def test_role_delete_is_restricted(db_session):
    role = Role(name="Admin")
    db_session.add(role)
    db_session.commit()
    db_session.add(User(email="a@b.com", phone_number="555", role_id=role.id))
    db_session.commit()

    db_session.delete(role)
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

    assert db_session.query(User).filter(User.email == "a@b.com").count() == 1
    assert db_session.query(Role).count() == 1


def test_user_requires_existing_role(db_session):
    db_session.add(User(email="a@b.com", phone_number="555", role_id=99))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_email_unique_index(db_session):
    role = Role(name="Admin")
    db_session.add(role)
    db_session.commit()
    db_session.add(User(email="a@b.com", phone_number="1", role_id=role.id))
    db_session.commit()

    db_session.add(User(email="a@b.com", phone_number="2", role_id=role.id))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_role_name_unique_index(db_session):
    db_session.add(Role(name="Admin"))
    db_session.commit()

    db_session.add(Role(name="Admin", description="again"))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_role_has_no_users_collection():
    assert not hasattr(Role, "users")
