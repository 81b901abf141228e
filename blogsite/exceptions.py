"""
Domain errors raised by the service layer.

Each class carries the HTTP status and the ``error`` label that the
response formatter in ``blogsite.errors`` renders; services never build
HTTP responses themselves.
"""


class BlogsiteError(Exception):
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserAlreadyExistsError(BlogsiteError):
    status_code = 409
    error = "User Already Exists"


class UserNotFoundError(BlogsiteError):
    status_code = 404
    error = "User Not Found"


class BlogNotFoundError(BlogsiteError):
    status_code = 404
    error = "Blog Not Found"
