"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Middleware personalizado para interceptar cada petición HTTP, 
               medir el tiempo que tarda el servidor en responder y registrar 
               las métricas de rendimiento en el log del proyecto.
--------------------------------------------------------------------------------
"""
import logging
import time  # Para medir el tiempo

logger = logging.getLogger(__name__)

# Respuestas más lentas que esto se registran como advertencia
UMBRAL_LENTO_MS = 1000


class MonitorRendimientoMiddleware:
    def __init__(self, get_response):
        # Guarda la función que procesa la siguiente parte de la cadena de middlewares/vistas
        self.get_response = get_response

    def __call__(self, request):
        # Marca el tiempo de inicio antes de procesar la vista
        inicio = time.monotonic()

        # Pasa la petición a la siguiente capa y obtiene la respuesta
        response = self.get_response(request)

        # Calcula la duración en milisegundos
        duracion_ms = int((time.monotonic() - inicio) * 1000)

        path = request.path  # Obtiene la ruta solicitada

        # Filtra rutas que no queremos medir (estáticos y admin)
        if not path.startswith("/static/") and not path.startswith("/admin/"):
            # DRF deja el principal autenticado en la request de Django
            sesion = getattr(request, "user", None)
            usuario = getattr(sesion, "colegiado", None) or "Anónimo"
            status_code = getattr(response, "status_code", 200)

            nivel = logging.WARNING if duracion_ms >= UMBRAL_LENTO_MS else logging.INFO
            logger.log(
                nivel,
                "%s %s -> %s (%d ms) usuario=%s",
                request.method, path[:255], status_code, duracion_ms, usuario,
            )

        # Devuelve la respuesta al cliente
        return response
