"""
API route definitions.
"""
from fastapi import APIRouter

from .identity import router as identity_router

api_router = APIRouter()

api_router.include_router(identity_router)

__all__ = ['api_router']
