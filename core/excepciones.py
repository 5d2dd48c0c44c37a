"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Taxonomía de errores del sistema y manejador de
                       excepciones de DRF. Los servicios lanzan estas
                       excepciones y el manejador las traduce a una
                       respuesta JSON uniforme {ok, error, tipo}.
--------------------------------------------------------------------------------
"""

import logging

from rest_framework import exceptions, status

logger = logging.getLogger(__name__)


class SolicitudInvalida(exceptions.APIException):
    """Entrada inválida, voto fuera de plazo o cupo agotado."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Solicitud inválida"
    default_code = "bad_request"


class NoAutorizado(exceptions.AuthenticationFailed):
    """Token ausente, inválido o expirado; credenciales incorrectas."""
    default_detail = "No autorizado"


class Prohibido(exceptions.PermissionDenied):
    """Rol insuficiente, cuenta inactiva o colegiado no habilitado."""
    default_detail = "Prohibido"


class NoEncontrado(exceptions.NotFound):
    default_detail = "No encontrado"


class Conflicto(exceptions.APIException):
    """Violación de unicidad: registro duplicado, voto duplicado, email/DPI repetido."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicto"
    default_code = "conflict"


# Nombre del tipo de error según el código HTTP
TIPOS = {
    400: "BadRequest",
    401: "Unauthorized",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
    409: "Conflict",
}


def _primer_mensaje(detalle):
    """Extrae el primer mensaje legible de un detalle de DRF (str, lista o dict)."""
    if isinstance(detalle, dict):
        for valor in detalle.values():
            return _primer_mensaje(valor)
        return "Datos inválidos"
    if isinstance(detalle, (list, tuple)):
        return _primer_mensaje(detalle[0]) if detalle else "Datos inválidos"
    return str(detalle)


def manejador_errores(exc, context):
    """
    EXCEPTION_HANDLER de DRF.
    Conserva el status y headers que arma DRF (WWW-Authenticate en 401) y
    reemplaza el cuerpo por {"ok": false, "error": ..., "tipo": ...}.
    """
    # Import local: rest_framework.views carga las clases de autenticación
    # de settings, y éstas importan este módulo
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)
    if response is None:
        # Error no controlado: DRF lo deja pasar como 500
        return None

    cuerpo = {
        "ok": False,
        "error": _primer_mensaje(response.data.get("detail", response.data)
                                 if isinstance(response.data, dict) else response.data),
        "tipo": TIPOS.get(response.status_code, "Error"),
    }
    # Errores de validación por campo
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        cuerpo["campos"] = exc.detail
        cuerpo["error"] = _primer_mensaje(exc.detail)

    if response.status_code >= 500:
        logger.error("Error %s en %s: %s", response.status_code, context.get("view"), cuerpo["error"])

    response.data = cuerpo
    return response
