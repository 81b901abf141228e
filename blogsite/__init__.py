"""User service, blog service and API gateway for the blogsite backend."""
