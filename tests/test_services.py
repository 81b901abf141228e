"""
Direct service-layer tests: exercises business logic without HTTP overhead.

These tests call service functions directly with a database session,
covering the lookups that are not exposed as endpoints (blog by name,
delete by author, plain date range, per-author count) as well as the
registration ordering rules.
"""
from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogsite.exceptions import BlogNotFoundError, UserAlreadyExistsError, UserNotFoundError
from blogsite.models import Blog, User
from blogsite.schemas import BlogRequest, UserRegistrationRequest
from blogsite.services import blog_service, user_service
from payloads import ARTICLE, blog_payload, user_payload


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _add_blog(
    db: AsyncSession,
    name: str = "A blog name long enough",
    category: str = "Software Engineering Practices",
    author: str = "johndoe",
    created_at: datetime | None = None,
) -> Blog:
    blog = Blog(blog_name=name, category=category, article=ARTICLE, author_name=author)
    if created_at is not None:
        blog.created_at = created_at
    db.add(blog)
    await db.flush()
    return blog


# ---------------------------------------------------------------------------
# user_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_user_via_service(db_session: AsyncSession):
    result = await user_service.register_user(
        db_session, UserRegistrationRequest(**user_payload())
    )
    assert result.user_name == "johndoe"
    assert result.message == "User registered successfully!"
    assert "password" not in result.model_dump()

    stored = (await db_session.execute(select(User))).scalar_one()
    assert stored.password == "password123"  # stored as given
    assert stored.created_at is not None
    assert stored.updated_at is not None


@pytest.mark.asyncio
async def test_register_checks_email_before_username(db_session: AsyncSession):
    await user_service.register_user(db_session, UserRegistrationRequest(**user_payload()))

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        await user_service.register_user(db_session, UserRegistrationRequest(**user_payload()))
    assert "email 'john@example.com'" in exc_info.value.message


@pytest.mark.asyncio
async def test_register_duplicate_username_via_service(db_session: AsyncSession):
    await user_service.register_user(db_session, UserRegistrationRequest(**user_payload()))

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        await user_service.register_user(
            db_session,
            UserRegistrationRequest(**user_payload(userEmail="second@example.com")),
        )
    assert exc_info.value.message == "A user with username 'johndoe' already exists"
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_get_user_by_email_via_service(db_session: AsyncSession):
    await user_service.register_user(db_session, UserRegistrationRequest(**user_payload()))
    result = await user_service.get_user_by_email(db_session, "john@example.com")
    assert result.user_name == "johndoe"
    assert result.message is None


@pytest.mark.asyncio
async def test_get_user_by_email_missing(db_session: AsyncSession):
    with pytest.raises(UserNotFoundError):
        await user_service.get_user_by_email(db_session, "ghost@example.com")


@pytest.mark.asyncio
async def test_get_user_by_username(db_session: AsyncSession):
    await user_service.register_user(db_session, UserRegistrationRequest(**user_payload()))
    result = await user_service.get_user_by_username(db_session, "johndoe")
    assert result.user_email == "john@example.com"

    with pytest.raises(UserNotFoundError):
        await user_service.get_user_by_username(db_session, "nobody")


# ---------------------------------------------------------------------------
# blog_service: writes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_blog_via_service(db_session: AsyncSession):
    result = await blog_service.create_blog(db_session, BlogRequest(**blog_payload()))
    assert result.id is not None
    assert result.blog_name == "Getting Started With Async Python"
    assert result.message == "Blog created successfully!"
    assert result.created_at is not None


@pytest.mark.asyncio
async def test_delete_blog_via_service(db_session: AsyncSession):
    await _add_blog(db_session, name="Doomed blog post title")
    await blog_service.delete_blog(db_session, "Doomed blog post title")

    with pytest.raises(BlogNotFoundError):
        await blog_service.get_blog_by_name(db_session, "Doomed blog post title")


@pytest.mark.asyncio
async def test_delete_blog_missing(db_session: AsyncSession):
    with pytest.raises(BlogNotFoundError) as exc_info:
        await blog_service.delete_blog(db_session, "missing")
    assert exc_info.value.message == "Blog not found with name: missing"


@pytest.mark.asyncio
async def test_delete_blog_by_author(db_session: AsyncSession):
    await _add_blog(db_session, name="Owned blog post title", author="johndoe")

    with pytest.raises(BlogNotFoundError) as exc_info:
        await blog_service.delete_blog_by_author(db_session, "Owned blog post title", "janedoe")
    assert exc_info.value.message == (
        "Blog not found with name: Owned blog post title for author: janedoe"
    )
    assert await blog_service.count_blogs_by_author(db_session, "johndoe") == 1

    await blog_service.delete_blog_by_author(db_session, "Owned blog post title", "johndoe")
    assert await blog_service.count_blogs_by_author(db_session, "johndoe") == 0


@pytest.mark.asyncio
async def test_delete_by_author_picks_that_authors_copy(db_session: AsyncSession):
    await _add_blog(db_session, name="Shared blog post title", author="johndoe")
    janes = await _add_blog(db_session, name="Shared blog post title", author="janedoe")

    await blog_service.delete_blog_by_author(db_session, "Shared blog post title", "johndoe")
    remaining = await blog_service.get_blog_by_name(db_session, "Shared blog post title")
    assert remaining.id == janes.id


# ---------------------------------------------------------------------------
# blog_service: reads
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_blog_by_name_prefers_oldest(db_session: AsyncSession):
    first = await _add_blog(db_session, name="Duplicate blog post title")
    await _add_blog(db_session, name="Duplicate blog post title")

    result = await blog_service.get_blog_by_name(db_session, "Duplicate blog post title")
    assert result.id == first.id


@pytest.mark.asyncio
async def test_get_blog_by_name_missing(db_session: AsyncSession):
    with pytest.raises(BlogNotFoundError) as exc_info:
        await blog_service.get_blog_by_name(db_session, "absent")
    assert exc_info.value.message == "Blog not found: absent"


@pytest.mark.asyncio
async def test_get_blogs_by_category_exact_match(db_session: AsyncSession):
    await _add_blog(db_session, category="Software Engineering Practices")
    await _add_blog(db_session, category="Software Engineering Practices and More")

    result = await blog_service.get_blogs_by_category(db_session, "Software Engineering Practices")
    assert len(result) == 1


@pytest.mark.asyncio
async def test_get_blogs_by_author_empty(db_session: AsyncSession):
    assert await blog_service.get_blogs_by_author(db_session, "nobody") == []


@pytest.mark.asyncio
async def test_get_blogs_by_date_range(db_session: AsyncSession):
    await _add_blog(db_session, name="old", created_at=datetime(2023, 3, 1))
    await _add_blog(db_session, name="early", category="Other Category For Tests",
                    created_at=datetime(2024, 2, 1))
    await _add_blog(db_session, name="late", created_at=datetime(2024, 11, 1))

    result = await blog_service.get_blogs_by_date_range(
        db_session, datetime(2024, 1, 1), datetime(2024, 12, 31, 23, 59, 59)
    )
    # Category is not a filter here, and the newest comes first.
    assert [b.blog_name for b in result] == ["late", "early"]


@pytest.mark.asyncio
async def test_category_date_range_orders_newest_first(db_session: AsyncSession):
    for day in (5, 20, 12):
        await _add_blog(db_session, name=f"day {day}", created_at=datetime(2024, 3, day))

    result = await blog_service.get_blogs_by_category_and_date_range(
        db_session,
        "Software Engineering Practices",
        datetime(2024, 3, 1),
        datetime(2024, 3, 31),
    )
    assert [b.blog_name for b in result] == ["day 20", "day 12", "day 5"]


@pytest.mark.asyncio
async def test_count_blogs_by_author(db_session: AsyncSession):
    for i in range(3):
        await _add_blog(db_session, name=f"post {i}", author="prolific")
    await _add_blog(db_session, name="other", author="someone")

    assert await blog_service.count_blogs_by_author(db_session, "prolific") == 3
    assert await blog_service.count_blogs_by_author(db_session, "absent") == 0
