"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from controle_financeiro.api.routes import auth, orcamentos, users

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(orcamentos.router, prefix="/orcamentos", tags=["orcamentos"])
router.include_router(users.router, prefix="/users", tags=["admin"])
