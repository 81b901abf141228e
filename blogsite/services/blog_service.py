"""
Blog service: creation, queries and deletion for the Blog aggregate.

Design notes
------------
- Blog names are not unique in the schema, yet deletion and lookup are
  addressed by name.  ``_find_by_name`` resolves duplicates to the oldest
  row (lowest id) and logs a warning, so a delete always removes exactly
  one row.
- Date-range queries are inclusive on both ends and ordered newest first.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogsite.exceptions import BlogNotFoundError
from blogsite.models import Blog
from blogsite.schemas import BlogRequest, BlogResponse

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Blog created successfully!"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_responses(blogs) -> list[BlogResponse]:
    return [BlogResponse.model_validate(b) for b in blogs]


def _local_naive(value: datetime) -> datetime:
    """Stored timestamps are naive local time; align aware bounds to that."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


async def _find_by_name(
    db: AsyncSession, blog_name: str, author_name: str | None = None
) -> Blog | None:
    """
    Return the oldest blog called *blog_name* (optionally also written by
    *author_name*), or None.
    """
    q = select(Blog).where(Blog.blog_name == blog_name)
    if author_name is not None:
        q = q.where(Blog.author_name == author_name)
    q = q.order_by(Blog.id)

    matches = (await db.execute(q)).scalars().all()
    if len(matches) > 1:
        logger.warning(
            "Blog name %r is shared by %d blogs; using id=%s",
            blog_name,
            len(matches),
            matches[0].id,
        )
    return matches[0] if matches else None


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_blog(db: AsyncSession, data: BlogRequest) -> BlogResponse:
    """Insert a new blog and return it with a success message."""
    logger.info("Creating new blog: %s", data.blog_name)
    blog = Blog(
        blog_name=data.blog_name,
        category=data.category,
        article=data.article,
        author_name=data.author_name,
    )
    db.add(blog)
    await db.flush()

    logger.info("Blog created successfully with ID: %s", blog.id)
    response = BlogResponse.model_validate(blog)
    response.message = CREATED_MESSAGE
    return response


async def delete_blog(db: AsyncSession, blog_name: str) -> None:
    """Delete the blog called *blog_name*; raises BlogNotFoundError."""
    logger.info("Attempting to delete blog: %s", blog_name)
    blog = await _find_by_name(db, blog_name)
    if blog is None:
        raise BlogNotFoundError(f"Blog not found with name: {blog_name}")

    await db.delete(blog)
    await db.flush()
    logger.info("Blog deleted successfully: %s", blog_name)


async def delete_blog_by_author(db: AsyncSession, blog_name: str, author_name: str) -> None:
    """
    Delete *blog_name* only if it was written by *author_name*.

    A blog that exists under another author is reported as not found.
    """
    logger.info("Attempting to delete blog: %s by author: %s", blog_name, author_name)
    blog = await _find_by_name(db, blog_name, author_name)
    if blog is None:
        raise BlogNotFoundError(
            f"Blog not found with name: {blog_name} for author: {author_name}"
        )

    await db.delete(blog)
    await db.flush()
    logger.info("Blog deleted successfully: %s", blog_name)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_blog_by_name(db: AsyncSession, blog_name: str) -> BlogResponse:
    logger.info("Fetching blog: %s", blog_name)
    blog = await _find_by_name(db, blog_name)
    if blog is None:
        raise BlogNotFoundError(f"Blog not found: {blog_name}")
    return BlogResponse.model_validate(blog)


async def get_blogs_by_category(db: AsyncSession, category: str) -> list[BlogResponse]:
    logger.info("Fetching blogs for category: %s", category)
    q = select(Blog).where(Blog.category == category).order_by(Blog.id)
    blogs = (await db.execute(q)).scalars().all()
    if not blogs:
        logger.warning("No blogs found for category: %s", category)
    return _to_responses(blogs)


async def get_blogs_by_author(db: AsyncSession, author_name: str) -> list[BlogResponse]:
    logger.info("Fetching blogs for author: %s", author_name)
    q = select(Blog).where(Blog.author_name == author_name).order_by(Blog.id)
    blogs = (await db.execute(q)).scalars().all()
    if not blogs:
        logger.info("Author %s has no blogs yet", author_name)
    return _to_responses(blogs)


async def get_blogs_by_category_and_date_range(
    db: AsyncSession,
    category: str,
    from_date: datetime,
    to_date: datetime,
) -> list[BlogResponse]:
    """
    Return blogs in *category* created within [*from_date*, *to_date*],
    newest first.
    """
    logger.info(
        "Fetching blogs - Category: %s, From: %s, To: %s", category, from_date, to_date
    )
    q = (
        select(Blog)
        .where(Blog.category == category)
        .where(Blog.created_at.between(_local_naive(from_date), _local_naive(to_date)))
        .order_by(Blog.created_at.desc(), Blog.id.desc())
    )
    blogs = (await db.execute(q)).scalars().all()
    if not blogs:
        logger.warning("No blogs found for given criteria")
    return _to_responses(blogs)


async def get_blogs_by_date_range(
    db: AsyncSession, from_date: datetime, to_date: datetime
) -> list[BlogResponse]:
    """Return every blog created within [*from_date*, *to_date*], newest first."""
    logger.info("Fetching blogs - From: %s, To: %s", from_date, to_date)
    q = (
        select(Blog)
        .where(Blog.created_at.between(_local_naive(from_date), _local_naive(to_date)))
        .order_by(Blog.created_at.desc(), Blog.id.desc())
    )
    return _to_responses((await db.execute(q)).scalars().all())


async def count_blogs_by_author(db: AsyncSession, author_name: str) -> int:
    logger.info("Counting blogs for author: %s", author_name)
    q = select(func.count()).select_from(Blog).where(Blog.author_name == author_name)
    return (await db.execute(q)).scalar_one()
