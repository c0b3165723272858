"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l'instance FastAPI (app).

Configure :

les logs JSON (avec un id par requête)

CORS (autorisations de qui peut appeler ces API)

titre, version, tags

schéma OpenAPI personnalisé

Inclut les routers (ex : /api/v1/audios).

Initialise la base au démarrage (@app.on_event("startup")).

🔹 Point unique d'exécution : uvicorn streetcode.main:app --reload.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from streetcode.core.config import settings
from streetcode.core.logging import configure_logging, ensure_request_id, request_id_ctx_var
from streetcode.core.openapi import custom_openapi
from streetcode.db.session import init_db

from streetcode.api.v1.routers import audios

import uvicorn

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version="0.0.1",
    openapi_tags=[
        {"name": "audios", "description": "Opérations liées au stockage des audios"},
    ],
)

# CORS (ajustez selon vos besoins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    request_id = ensure_request_id(request.headers.get("X-Request-ID"))
    token = request_id_ctx_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_ctx_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response

# Routers
app.include_router(audios.router, prefix="/api/v1")

# Génération du schéma OpenAPI custom
app.openapi = lambda: custom_openapi(app)

# Démarrage
@app.on_event("startup")
def on_startup():
    init_db()

if __name__ == "__main__":
    uvicorn.run("streetcode.main:app", host="127.0.0.1", port=8080, reload=(settings.ENV == "dev")) # http://localhost:8080
