import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogsite.database import get_db
from blogsite.exceptions import UserAlreadyExistsError
from blogsite.schemas import UserRegistrationRequest, UserResponse
from blogsite.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1.0/blogsite/user", tags=["users"])


@router.post("/register", status_code=201, response_model=UserResponse)
async def register_user(data: UserRegistrationRequest, db: AsyncSession = Depends(get_db)):
    logger.info("Received registration request for email: %s", data.user_email)
    try:
        return await user_service.register_user(db, data)
    except IntegrityError:
        # Lost the check-then-insert race to a concurrent registration.
        raise UserAlreadyExistsError("A user with this username or email already exists")


# Declared before "/{email}" so the literal path wins.
@router.get("/health", response_class=PlainTextResponse)
async def health():
    return "User Service is running!"


@router.get("/{email}", response_model=UserResponse, response_model_exclude_none=True)
async def get_user_by_email(email: str, db: AsyncSession = Depends(get_db)):
    logger.info("Fetching user details for email: %s", email)
    return await user_service.get_user_by_email(db, email)
