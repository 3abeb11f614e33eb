"""API Routers Package.

Routers:
- contacts.py: contact CRUD, owner lookup, search
- users.py: user CRUD

Usage in main.py:
    from api.routers import contacts_router, users_router

    app.include_router(contacts_router, prefix="/contacts", tags=["contacts"])
    app.include_router(users_router, prefix="/users", tags=["users"])
"""

from .contacts import router as contacts_router
from .users import router as users_router

__all__ = [
    "contacts_router",
    "users_router",
]
