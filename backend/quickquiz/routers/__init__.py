from quickquiz.routers import health, users

__all__ = [
    "health",
    "users",
]
