"""Database seeder for local development of the marketplace API."""
import argparse
import asyncio
import random
import time

from marketplace.database import async_session, recreate_tables
from marketplace.models import Ad, Comment, Role, User
from marketplace.passwords import hash_password

FIRST_NAMES = ["Anna", "Boris", "Irina", "Oleg", "Pavel", "Daria", "Sergei", "Vera"]
LAST_NAMES = ["Ivanova", "Petrov", "Sokolova", "Smirnov", "Orlova", "Volkov"]
THINGS = ["bicycle", "sofa", "laptop", "guitar", "stroller", "camera", "desk lamp", "kettle"]

DEFAULT_PASSWORD = "password123"


async def seed(small: bool = False):
    num_users = 5 if small else 30
    num_ads = 20 if small else 500
    max_comments_per_ad = 2 if small else 6

    print(f"Seeding: 1 admin, {num_users} users, {num_ads} ads")
    start = time.perf_counter()

    await recreate_tables()

    async with async_session() as session:
        password = hash_password(DEFAULT_PASSWORD)

        admin = User(
            email="admin@example.com",
            first_name="Admin",
            last_name="Admin",
            phone="+7 (900) 000-00-00",
            role=Role.ADMIN.value,
            password=password,
        )
        session.add(admin)

        users = []
        for i in range(num_users):
            user = User(
                email=f"user{i:03d}@example.com",
                first_name=random.choice(FIRST_NAMES),
                last_name=random.choice(LAST_NAMES),
                phone=f"+7 (9{i % 100:02d}) {random.randint(100, 999)}-{random.randint(10, 99)}-{random.randint(10, 99)}",
                role=Role.USER.value,
                password=password,
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users) + 1} accounts (password: {DEFAULT_PASSWORD})")

        ads = []
        for i in range(num_ads):
            thing = random.choice(THINGS)
            ad = Ad(
                title=f"Selling a {thing}"[:32],
                price=random.randint(0, 100_000),
                description=f"Used {thing} in good condition, pickup only",
                author_id=random.choice(users).id,
            )
            session.add(ad)
            ads.append(ad)
        await session.flush()
        print(f"  Created {len(ads)} ads (no pictures)")

        total_comments = 0
        now_ms = time.time_ns() // 1_000_000
        for ad in ads:
            for _ in range(random.randint(0, max_comments_per_ad)):
                author = random.choice(users)
                session.add(
                    Comment(
                        text="Is this still available?",
                        created_at=now_ms - random.randint(0, 30 * 24 * 3600 * 1000),
                        author_first_name=author.first_name,
                        author_image=author.image,
                        author_id=author.id,
                        ad_id=ad.id,
                    )
                )
                total_comments += 1
        await session.flush()
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Comments: {total_comments}")


def main():
    parser = argparse.ArgumentParser(description="Seed the marketplace database")
    parser.add_argument("--small", action="store_true", help="Use a small dataset")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
