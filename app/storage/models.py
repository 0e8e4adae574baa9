# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/2 21:30
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 键值持久化存储的数据库模型
"""

from datetime import datetime, UTC

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class KeyValueEntry(Base):
    __tablename__ = "translator_kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self):
        return f"<KeyValueEntry(key='{self.key}', size={len(self.value or '')})>"
