import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from blogsite.database import get_db
from blogsite.schemas import BlogRequest, BlogResponse
from blogsite.services import blog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1.0/blogsite", tags=["blogs"])

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def parse_date_range(
    from_date: str = Path(..., alias="fromDate"),
    to_date: str = Path(..., alias="toDate"),
) -> tuple[datetime, datetime]:
    """
    Parse both range bounds strictly as ``yyyy-MM-ddTHH:mm:ss``.

    Every malformed bound is reported in the 400 ``errors`` map under its
    path parameter name.
    """
    parsed: dict[str, datetime] = {}
    errors = []
    for name, value in (("fromDate", from_date), ("toDate", to_date)):
        try:
            parsed[name] = datetime.strptime(value, DATE_FORMAT)
        except ValueError:
            errors.append({
                "loc": ("path", name),
                "msg": f"{name} must use the format yyyy-MM-ddTHH:mm:ss",
                "type": "datetime_from_date_parsing",
                "input": value,
            })
    if errors:
        raise RequestValidationError(errors)
    return parsed["fromDate"], parsed["toDate"]


@router.post("/user/blogs/add/{blogName}", status_code=201, response_model=BlogResponse)
async def create_blog(
    data: BlogRequest,
    blog_name: str = Path(..., alias="blogName"),
    db: AsyncSession = Depends(get_db),
):
    # The path segment is informational only; the body's blogName is stored.
    logger.info("Creating blog: %s", blog_name)
    return await blog_service.create_blog(db, data)


@router.get("/blogs/info/{category}", response_model=list[BlogResponse])
async def get_blogs_by_category(category: str, db: AsyncSession = Depends(get_db)):
    return await blog_service.get_blogs_by_category(db, category)


@router.get("/user/getall", response_model=list[BlogResponse])
async def get_blogs_by_author(
    author_name: str = Query(..., alias="authorName", description="Author's username"),
    db: AsyncSession = Depends(get_db),
):
    return await blog_service.get_blogs_by_author(db, author_name)


@router.delete("/user/delete/{blogName}", status_code=204)
async def delete_blog(
    blog_name: str = Path(..., alias="blogName"),
    db: AsyncSession = Depends(get_db),
):
    await blog_service.delete_blog(db, blog_name)
    return Response(status_code=204)


@router.get("/blogs/get/{category}/{fromDate}/{toDate}", response_model=list[BlogResponse])
async def get_blogs_by_category_and_date_range(
    category: str,
    date_range: tuple[datetime, datetime] = Depends(parse_date_range),
    db: AsyncSession = Depends(get_db),
):
    """Dates use ``yyyy-MM-ddTHH:mm:ss``, e.g. ``2024-01-01T00:00:00``."""
    from_date, to_date = date_range
    return await blog_service.get_blogs_by_category_and_date_range(db, category, from_date, to_date)


@router.get("/health", response_class=PlainTextResponse)
async def health():
    return "Blog Service is running!"
