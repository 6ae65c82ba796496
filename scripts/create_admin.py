#!/usr/bin/env python3
"""
Скрипт для создания администратора блога.

Использование:
    python scripts/create_admin.py --username admin --email admin@blog.local --password secret
"""

import argparse
import sys

from sqlalchemy import or_, select

from blog_api.core.auth import AuthService
from blog_api.db.database import SessionLocal
from blog_api.db.models import ROLE_ADMIN, User


def create_admin(username: str, email: str, password: str) -> bool:
    """Создает администратора или сбрасывает пароль существующему."""
    print("🔑 Создание администратора...")

    db = SessionLocal()
    try:
        existing = db.scalar(
            select(User).where(or_(User.username == username, User.email == email))
        )
        hashed_password = AuthService.get_password_hash(password)

        if existing:
            existing.hashed_password = hashed_password
            existing.role = ROLE_ADMIN
            db.commit()
            print(f"✅ Пользователь {existing.username} уже существует: роль admin, пароль обновлен")
        else:
            admin_user = User(
                username=username,
                email=email.lower(),
                hashed_password=hashed_password,
                role=ROLE_ADMIN,
            )
            db.add(admin_user)
            db.commit()
            print("✅ Администратор создан успешно!")
            print(f"   Username: {admin_user.username}")
            print(f"   Email: {admin_user.email}")
            print(f"   ID: {admin_user.id}")

        return True

    except Exception as e:
        db.rollback()
        print(f"❌ Ошибка при создании администратора: {e}")
        return False
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Создать администратора блога")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", default="admin@blog.local")
    parser.add_argument("--password", required=True)
    args = parser.parse_args()

    if not create_admin(args.username, args.email, args.password):
        sys.exit(1)


if __name__ == "__main__":
    main()
