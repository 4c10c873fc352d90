from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.models import ROLES, User
from core.utils import utc_now

USERS_KEY = "users"
SESSION_KEY = "user"

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    success: bool
    message: str
    user: Optional[User] = None


def _default_admin() -> User:
    return User(
        id="1",
        username="admin",
        password="admin",
        role="admin",
        name="Administrator",
        start_date=utc_now().isoformat(timespec="milliseconds"),
        permissions=["all"],
    )


def ensure_default_admin(storage) -> None:
    if storage.get(USERS_KEY) is None:
        storage.set(USERS_KEY, [_default_admin().to_dict()])


def list_users(storage) -> list[User]:
    raw = storage.get(USERS_KEY)
    if raw is None:
        return [_default_admin()]
    return [User.from_dict(u) for u in raw]


def _save_users(storage, users: list[User]) -> None:
    storage.set(USERS_KEY, [u.to_dict() for u in users])


def login(storage, username: str, password: str) -> LoginResult:
    # Plain equality against the stored list: no hashing, no tokens.
    if not str(username).strip() or not str(password).strip():
        return LoginResult(False, "Enter a username and password.")

    user = next((u for u in list_users(storage) if u.username == username and u.password == password), None)
    if user is None:
        logger.info("Failed login for %r", username)
        return LoginResult(False, "Wrong username or password.")

    storage.set(SESSION_KEY, user.to_dict())
    logger.info("User %s logged in", user.username)
    return LoginResult(True, f"Welcome {user.name or user.username}", user)


def logout(storage) -> None:
    storage.delete(SESSION_KEY)


def current_user(storage) -> Optional[User]:
    raw = storage.get(SESSION_KEY)
    return User.from_dict(raw) if raw else None


def has_permission(user: Optional[User], permission: str) -> bool:
    if user is None:
        return False
    return user.role == "admin" or "all" in user.permissions or permission in user.permissions


def add_user(
    storage,
    *,
    username: str,
    password: str,
    name: str,
    role: str = "employee",
    phone: str = "",
    address: str = "",
    permissions: Optional[list[str]] = None,
) -> User:
    if not str(username).strip() or not str(password).strip() or not str(name).strip():
        raise ValueError("Username, password and name are required.")
    if role not in ROLES:
        raise ValueError(f"Invalid role. Use one of: {', '.join(ROLES)}.")

    users = list_users(storage)
    if any(u.username == username for u in users):
        raise ValueError("Username already exists.")

    now = utc_now()
    user = User(
        id=str(max([int(now.timestamp() * 1000)] + [int(u.id) + 1 for u in users if u.id.isdigit()])),
        username=username,
        password=password,
        role=role,
        name=name,
        phone=phone,
        address=address,
        start_date=now.isoformat(timespec="milliseconds"),
        permissions=list(permissions or []),
    )
    users.append(user)
    _save_users(storage, users)
    logger.info("User %s added (%s)", username, role)
    return user


def update_user(storage, user_id: str, patch: dict) -> Optional[User]:
    users = list_users(storage)
    user = next((u for u in users if u.id == user_id), None)
    if user is None:
        return None
    user.merge(patch)
    _save_users(storage, users)
    return user


def delete_user(storage, user_id: str) -> None:
    users = list_users(storage)
    target = next((u for u in users if u.id == user_id), None)
    if target is None:
        return
    if target.username == "admin":
        raise ValueError("The main administrator cannot be deleted.")
    _save_users(storage, [u for u in users if u.id != user_id])
