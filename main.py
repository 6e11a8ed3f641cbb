import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import FinalPointError
from app.core.logging import setup_logging

# IMPORTANTE: Importar Base y Engine para que funcione la creación de tablas
from app.db.session import engine, Base

# Importar modelos para que SQLAlchemy los "vea" antes de crear las tablas
from app.db.models import _all

# Importar las rutas (los routers)
from app.api.auth import router as auth_router
from app.api.drivers import router as drivers_router
from app.api.races import router as races_router
from app.api.leagues import router as leagues_router
from app.api.picks import router as picks_router
from app.api.race_results import router as race_results_router
from app.api.scoring import router as scoring_router
from app.api.admin import router as admin_router
from app.api.users import router as users_router
from app.api.stats import router as stats_router
from app.api.activity import router as activity_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
)

# Creamos las tablas en la base de datos
Base.metadata.create_all(bind=engine)

# Conectamos las piezas (routers)
app.include_router(auth_router)
app.include_router(drivers_router)
app.include_router(races_router)
app.include_router(leagues_router)
app.include_router(picks_router)
app.include_router(race_results_router)
app.include_router(scoring_router)
app.include_router(admin_router)
app.include_router(users_router)
app.include_router(stats_router)
app.include_router(activity_router)


@app.exception_handler(FinalPointError)
def finalpoint_error_handler(request: Request, exc: FinalPointError):
    # Errores de reglas del juego -> 4xx con el mismo formato que HTTPException
    logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Configuramos el permiso para que el frontend pueda hablar con la API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "API FinalPoint funcionando 🏎️"}
