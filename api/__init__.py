"""
Módulo API del servicio.
Contiene rutas y modelos de request/response.

Los routers se importan directamente desde sus módulos (api.routes,
api.analytics_routes) para que los modelos se puedan usar sin cargar FastAPI.
"""
