import logging
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from supabase import Client

from keno_admin.config import settings
from keno_admin.core.errors import AuthorizationError, authorization_error_handler
from keno_admin.core.middleware import SecurityHeadersMiddleware
from keno_admin.core.rate_limit import limiter
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.supabase_client import get_service_supabase
from keno_admin.modules.auth import routes as auth_routes
from keno_admin.modules.staff import routes as staff_routes
from keno_admin.modules.roles import routes as roles_routes
from keno_admin.modules.roles.cache import RoleCache
from keno_admin.modules.venues import routes as venues_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.state.role_cache = RoleCache(settings.role_cache_ttl_seconds)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(AuthorizationError, authorization_error_handler)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # Unexpected failures never revoke the session: no cookies are touched here.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = "Internal Server Error" if settings.is_production else (str(exc) or "Internal Server Error")
    return JSONResponse(status_code=500, content={"error": message})


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module_routes in (auth_routes, staff_routes, roles_routes, venues_routes):
    app.include_router(module_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info(
        "Application startup (environment=%s, staff team=%s, schema=%s)",
        settings.environment, settings.staff_team_id, settings.database_id
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready(supabase: Client = Depends(get_service_supabase)):
    """Readiness check: the roles collection must be reachable."""
    try:
        DocumentStore(supabase).list(settings.roles_collection_id, limit=1)
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
