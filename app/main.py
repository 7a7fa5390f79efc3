import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.v1.api import api_router
from app.api.v1.endpoints import sites
from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import BusinessError, InternalInvariantError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BusinessError)
async def business_error_handler(request: Request, exc: BusinessError):
    detail = exc.detail
    if isinstance(exc, InternalInvariantError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
        detail = exc.public_detail
    return JSONResponse(status_code=exc.status_code, content={"detail": detail, **exc.extra})


# Initialize database on startup
@app.on_event("startup")
def on_startup():
    init_db()

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health")
def health_check():
    return {"status": "healthy"}


# Catch-all slug routes go last
app.include_router(sites.router)
