"""
Database configuration

Re-exports the SQLAlchemy base and database wrapper from orm_db_setting.py.
"""

from src.platform.database.orm_db_setting import AsyncEngineManager, Base, Database

__all__ = [
    'AsyncEngineManager',
    'Base',
    'Database',
]
