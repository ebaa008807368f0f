from fastapi_users.db import SQLAlchemyBaseUserTableUUID, SQLAlchemyUserDatabase
from sqlalchemy.orm import relationship
from .database import Base


class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"

    transactions = relationship("Transaction", back_populates="created_by_user")


def user_database(session):
    return SQLAlchemyUserDatabase(session, User)
