"""Декларативная база для всех ORM-моделей."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Единые имена индексов и ограничений в схеме PostgreSQL
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Базовый класс для всех моделей SQLAlchemy.

    Таблицы создаются `create_tables()` по `Base.metadata` при старте.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
