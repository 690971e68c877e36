from fastapi import APIRouter

from backend.app.api.v1 import audit, documents, versions

router = APIRouter(prefix="/api/v1")

router.include_router(documents.router, prefix="/documents", tags=["documents"])
router.include_router(versions.router, prefix="/documents", tags=["versions"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])

__all__ = ["router"]
