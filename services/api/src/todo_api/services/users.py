"""用户凭据存储访问。"""

from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session

from todo_api.models.user import User


def find_user_by_username(db: Session, username: str) -> User | None:
    """按用户名查找用户。"""
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def user_exists(db: Session, username: str, email: str) -> bool:
    """用户名或邮箱任一已被占用即视为存在。"""
    stmt = select(exists().where(or_(User.username == username, User.email == email)))
    return bool(db.execute(stmt).scalar())


def insert_user(db: Session, *, username: str, email: str, password_hash: str) -> User:
    """写入新用户并分配 ID；唯一约束冲突时由数据库抛出 IntegrityError。"""
    user = User(username=username, email=email, password_hash=password_hash)
    db.add(user)
    db.flush()
    return user
