"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, health, mock_exams, problems, upload

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(problems.router, prefix="/problems", tags=["problems"])
router.include_router(mock_exams.router, prefix="/mock-exams", tags=["mock-exams"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(upload.router, prefix="/upload", tags=["upload"])
