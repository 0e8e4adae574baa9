# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/2 21:34
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : PersistentStore 的实现：数据库键值表与内存字典
"""

from pathlib import Path
from typing import Dict, Optional, Protocol

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session

from .models import Base, KeyValueEntry


class PersistentStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, raw: str) -> None: ...


class SqlKeyValueStore:
    """基于 SQLAlchemy 的键值存储，每次操作使用独立会话"""

    def __init__(self, database_url: str):
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_engine(database_url)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)

    def init_database(self):
        """初始化数据库表"""
        try:
            Base.metadata.create_all(bind=self._engine)
            logger.success("键值存储数据库表初始化成功")
        except Exception as e:
            logger.error(f"键值存储数据库表初始化失败: {e}")
            raise

    def get_db_session(self) -> Session:
        return self._session_factory()

    def get(self, key: str) -> Optional[str]:
        session = self.get_db_session()
        try:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry else None
        finally:
            session.close()

    def set(self, key: str, raw: str) -> None:
        session = self.get_db_session()
        try:
            entry = session.get(KeyValueEntry, key)
            if entry:
                entry.value = raw
            else:
                session.add(KeyValueEntry(key=key, value=raw))
            session.commit()
            logger.debug(f"已写入持久化键 {key} ({len(raw)} bytes)")
        except Exception as e:
            session.rollback()
            logger.error(f"写入持久化键 {key} 失败: {e}")
            raise
        finally:
            session.close()

    def dispose(self):
        self._engine.dispose()


class MemoryStore:
    """进程内存储，用于开发调试与测试"""

    def __init__(self, initial: Dict[str, str] | None = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, raw: str) -> None:
        self.data[key] = raw
        self.writes += 1
