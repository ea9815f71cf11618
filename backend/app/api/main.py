from fastapi import APIRouter, Depends

from app.api.rate_limit import api_limiter
from app.api.routes import auth, generations, projects, setup, templates, utils

limited = [Depends(api_limiter)]

api_router = APIRouter()
api_router.include_router(auth.router, dependencies=limited)
api_router.include_router(projects.router, dependencies=limited)
api_router.include_router(generations.router, dependencies=limited)
api_router.include_router(templates.router, dependencies=limited)
api_router.include_router(setup.router, dependencies=limited)
# Health checks are never rate limited
api_router.include_router(utils.router)
