"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) modifie le schéma généré par FastAPI pour :

ajouter une description détaillée (conventions de l'API audios),

centraliser la personnalisation du Swagger.
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API des audios rattachés aux streetcodes.\n\n"
            "### Conventions\n"
            "- Le contenu audio circule en base64 (`base64`), sauf `/audios/{id}/base` qui renvoie le flux brut.\n"
            "- Les échecs prévus renvoient 400 avec la liste des messages dans `detail`.\n"
            "- Un streetcode sans audio renvoie 200 avec un corps `null`.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
