"""Development data seeder for the blogsite services."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timedelta

from blogsite.database import engine, async_session, Base
from blogsite.models import Blog
from blogsite.schemas import UserRegistrationRequest
from blogsite.services import user_service

CATEGORIES = [
    "Software Engineering Practices",
    "Distributed Systems and Networking",
    "Personal Finance and Investing",
    "Travel Stories from Around the World",
    "Home Cooking and Seasonal Recipes",
]

PARAGRAPH = (
    "Writing about a topic for a long time teaches you which ideas hold up "
    "and which ones fall apart once they meet real readers. This paragraph "
    "is filler text generated by the seeder so that every article clears "
    "the minimum length that the blog service enforces on creation. "
)


async def seed(small: bool = False):
    num_users = 5 if small else 25
    blogs_per_user = 3 if small else 20

    print(f"Seeding: {num_users} users, {num_users * blogs_per_user} blogs")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        user_names = []
        for i in range(num_users):
            registered = await user_service.register_user(
                session,
                UserRegistrationRequest(
                    userName=f"author{i:03d}",
                    userEmail=f"author{i:03d}@example.com",
                    password=f"password{i:03d}",
                ),
            )
            user_names.append(registered.user_name)
        print(f"  Registered {len(user_names)} users")

        # Blogs are inserted directly so their creation dates can be spread
        # over the past year for date-range queries.
        for user_name in user_names:
            for j in range(blogs_per_user):
                category = random.choice(CATEGORIES)
                session.add(Blog(
                    blog_name=f"{category} notes by {user_name} #{j}",
                    category=category,
                    article=PARAGRAPH * 5,
                    author_name=user_name,
                    created_at=datetime.now() - timedelta(days=random.randint(0, 365)),
                ))
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"Done in {elapsed:.1f}s")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the blogsite database")
    parser.add_argument("--small", action="store_true", help="Seed a small dataset")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))
