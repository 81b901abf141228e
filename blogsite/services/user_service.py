"""
User service: registration and lookup for the User aggregate.

Uniqueness of email and username is checked with a read before the
insert, inside the request transaction.  Two concurrent registrations
can still both pass the check; the unique constraints on the table are
the backstop and the router turns the resulting ``IntegrityError`` into a
409.
"""
import logging

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogsite.exceptions import UserAlreadyExistsError, UserNotFoundError
from blogsite.models import User
from blogsite.schemas import UserRegistrationRequest, UserResponse

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "User registered successfully!"


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

async def _email_taken(db: AsyncSession, email: str) -> bool:
    return (await db.execute(select(exists().where(User.user_email == email)))).scalar_one()


async def _username_taken(db: AsyncSession, user_name: str) -> bool:
    return (await db.execute(select(exists().where(User.user_name == user_name)))).scalar_one()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def register_user(db: AsyncSession, data: UserRegistrationRequest) -> UserResponse:
    """
    Register a new user and return its public representation.

    Email is checked before username so a request colliding on both is
    reported as an email conflict.  The password is stored as given and
    is never part of the response.
    """
    logger.info("Attempting to register user with email: %s", data.user_email)

    if await _email_taken(db, data.user_email):
        logger.warning("Registration failed: email already exists: %s", data.user_email)
        raise UserAlreadyExistsError(f"A user with email '{data.user_email}' already exists")

    if await _username_taken(db, data.user_name):
        logger.warning("Registration failed: username already exists: %s", data.user_name)
        raise UserAlreadyExistsError(f"A user with username '{data.user_name}' already exists")

    user = User(
        user_name=data.user_name,
        user_email=data.user_email,
        password=data.password,
    )
    db.add(user)
    await db.flush()

    logger.info("User registered successfully with ID: %s", user.id)
    response = UserResponse.model_validate(user)
    response.message = REGISTERED_MESSAGE
    return response


async def get_user_by_email(db: AsyncSession, email: str) -> UserResponse:
    """Return the user registered with *email*; raises UserNotFoundError."""
    logger.info("Searching for user with email: %s", email)
    result = await db.execute(select(User).where(User.user_email == email))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("User not found with email: %s", email)
        raise UserNotFoundError(f"User not found with email: {email}")
    return UserResponse.model_validate(user)


async def get_user_by_username(db: AsyncSession, user_name: str) -> UserResponse:
    logger.info("Searching for user with username: %s", user_name)
    result = await db.execute(select(User).where(User.user_name == user_name))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFoundError(f"User not found with username: {user_name}")
    return UserResponse.model_validate(user)
