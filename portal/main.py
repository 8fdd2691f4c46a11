from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from portal.api.routes import router
from portal.api.admin_routes import router as admin_router
from portal.api.deps import get_registries
from portal.core.demo_data import seed_demo_data
from portal.core.errors import ConflictError, NotFoundError, PortalError, ValidationError
from portal.observability.logging import log
from portal.settings import settings

app = FastAPI(title="Passport Application Portal API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(admin_router)

STATUS_BY_ERROR = {
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 422,
}


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Passport portal API is running. Applicant routes live under /api, dashboard routes under /admin.",
    }


@app.get("/health")
def health():
    return {"status": "ok", "storeBackend": settings.STORE_BACKEND}


# ---------------------------------------------------------------------------
# Domain errors surface as-is; the presentation layer words them for users.
# ---------------------------------------------------------------------------
@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    status_code = next((code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)), 400)
    content = {"error": exc.kind, "detail": exc.message}
    if isinstance(exc, ValidationError) and exc.fields:
        content["fields"] = exc.fields
    log(event="request_rejected", path=request.url.path, error=exc.kind, statusCode=status_code)
    return JSONResponse(status_code=status_code, content=content)


@app.on_event("startup")
def seed_on_startup():
    if settings.SEED_DEMO_DATA:
        registries = get_registries()
        seed_demo_data(registries.applications, registries.users)
    log(event="boot", storeBackend=settings.STORE_BACKEND, seedDemoData=bool(settings.SEED_DEMO_DATA))
