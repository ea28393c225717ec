"""
Database seeding script for initial users.

Creates the administrator accounts, which cannot self-register.
Run with `python -m triplog.seed_users` after the database is reachable.
"""

import asyncio

from triplog.app.db.session import AsyncSessionLocal, init_models
from triplog.app.models.user import User
from triplog.app.models.enums import UserRole
from triplog.app.core.security import get_password_hash

SEED_USERS = [
    # id, name, email, password, role
    ("admin", "Administrador Sistema", "admin@empresa.com", "admin", UserRole.SUPER_ADMIN),
    ("revisor", "Revisor de Viagens", "revisor@empresa.com", "revisor", UserRole.ADMIN),
]


async def seed_users():
    """
    Seed initial users.

    Existing ids are left untouched, so the script can be re-run safely.
    """
    await init_models()

    async with AsyncSessionLocal() as db:
        print("🌱 Starting user seeding...")

        for user_id, name, email, password, role in SEED_USERS:
            if await db.get(User, user_id) is not None:
                print(f"ℹ️  {user_id} already exists, skipping")
                continue

            db.add(User(
                id=user_id,
                name=name,
                email=email,
                hashed_password=get_password_hash(password),
                role=role,
                is_active=True,
            ))
            print(f"✅ Created {role.value} user (id: {user_id}, password: {password})")

        await db.commit()

        print("\n🎉 User seeding completed successfully!")
        print("\nNote: drivers register via POST /v1/auth/register")


if __name__ == "__main__":
    asyncio.run(seed_users())
