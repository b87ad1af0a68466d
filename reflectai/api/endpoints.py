from fastapi import APIRouter

from reflectai.api.routes import auth, editor, entries, health


router = APIRouter()

router.include_router(auth.router)
router.include_router(entries.router)
router.include_router(editor.router)
router.include_router(health.router)
