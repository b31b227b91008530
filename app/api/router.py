from fastapi import APIRouter

from app.api.endpoints import auth, carts, items, users

router = APIRouter()

router.include_router(auth.router)
router.include_router(auth.logout_router)
router.include_router(users.router)
router.include_router(users.my_router)
router.include_router(items.router)
router.include_router(carts.router)
