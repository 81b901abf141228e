# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   user_service: registration + lookup for User
#   blog_service: create, query and delete-by-name for Blog
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``blogsite.exceptions``
# errors and rendered by ``blogsite.errors``.
