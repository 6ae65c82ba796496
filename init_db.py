#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных блога
"""

import sys

from sqlalchemy import inspect

from blog_api.db.database import engine
from blog_api.db.models import Base


def init_database() -> bool:
    """Создает все таблицы в базе данных."""
    print("🗄️ Инициализация базы данных...")

    try:
        Base.metadata.create_all(bind=engine)
        print("✅ Все таблицы созданы успешно!")

        tables = inspect(engine).get_table_names()
        print(f"📋 Таблиц в базе: {len(tables)}")
        for table in tables:
            print(f"  - {table}")

        return True

    except Exception as e:
        print(f"❌ Ошибка создания таблиц: {e}")
        return False


if __name__ == "__main__":
    if not init_database():
        sys.exit(1)
