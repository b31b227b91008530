import asyncio
import os

from sqlalchemy import select

from app.core.roles import UserRole
from app.core.security import hash_password
from app.db.sessions import get_async_session
from app.models.user import User


async def create_admin():
    password = os.environ.get("ADMIN_PASSWORD")
    if not password:
        raise RuntimeError("ADMIN_PASSWORD env var not set")

    email = os.environ.get("ADMIN_EMAIL", "admin@example.com").lower()

    async for session in get_async_session():
        result = await session.execute(select(User).where(User.email == email))

        if result.scalar_one_or_none():
            print("Admin already exists!")
            return

        admin = User(
            name="System Admin",
            email=email,
            hashed_password=hash_password(password),
            role=UserRole.ADMIN,
            is_active=True,
        )

        session.add(admin)
        await session.commit()
        print(f"Successfully created admin: {email}")

if __name__ == "__main__":
    asyncio.run(create_admin())
