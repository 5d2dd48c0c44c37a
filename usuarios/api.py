"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Endpoints API de autenticación y administración del padrón.
               - Registro, login de votante, login de administrador, sesión actual.
               - Estado público de un colegiado (apoyo a la pantalla de registro).
               - Gestión del padrón para administradores: listado con filtros,
                 sincronización, diagnóstico, edición, reseteo y promoción.
--------------------------------------------------------------------------------
"""
import logging

from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core import padron
from core.authz import EstaAutenticado, rol_requerido
from core.excepciones import SolicitudInvalida
from core.models import Ingeniero

from . import servicios
from .filters import IngenieroFilter
from .serializers import (
    AdminLoginSerializer,
    IngenieroPatchSerializer,
    IngenieroSerializer,
    LoginSerializer,
    RegistroSerializer,
    SincronizarPadronSerializer,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Autenticación
# ---------------------------------------------------------------------------
@api_view(["POST"])
@permission_classes([AllowAny])
def registro(request):
    """
    Endpoint: Auto-registro de un ingeniero que figura en el padrón.
    """
    s = RegistroSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ing = servicios.registrar(**s.validated_data)
    return Response(
        {"ok": True, "colegiado": ing.colegiado, "nombre": ing.nombre},
        status=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
@permission_classes([AllowAny])
def login(request):
    """
    Endpoint: Login de votante. Retorna el token Bearer.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    token = servicios.iniciar_sesion(**s.validated_data)
    return Response({"token": token})


@api_view(["POST"])
@permission_classes([AllowAny])
def admin_login(request):
    """
    Endpoint: Login de administrador por colegiado o email.
    """
    s = AdminLoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    token = servicios.iniciar_sesion_admin(
        password=s.validated_data["password"],
        colegiado=s.validated_data["identificador"],
    )
    return Response({"token": token})


@api_view(["GET"])
@permission_classes([EstaAutenticado])
def yo(request):
    """Datos de la sesión actual (lo que viaja en el token)."""
    return Response(request.user.como_dict())


@api_view(["GET"])
@permission_classes([AllowAny])
def estado_colegiado(request, colegiado):
    """Estado público de un colegiado: existe, activo, ya tiene cuenta."""
    return Response(padron.estado_colegiado(colegiado))


# ---------------------------------------------------------------------------
# Administración del padrón
# ---------------------------------------------------------------------------
class IngenierosAdminView(generics.ListAPIView):
    """
    Listado del padrón con búsqueda (?q=) y filtros (?activo=, ?is_admin=).
    """
    serializer_class = IngenieroSerializer
    filterset_class = IngenieroFilter
    permission_classes = [rol_requerido("padron", "view")]
    pagination_class = None

    def get_queryset(self):
        return Ingeniero.objects.order_by("nombre", "id")

    def filter_queryset(self, queryset):
        # Tope fijo de filas para la pantalla de administración
        return super().filter_queryset(queryset)[:padron.LIMITE_LISTADO]


class IngenieroAdminView(APIView):
    """Edición puntual de un ingeniero (nombre, email, activo, contraseña)."""
    permission_classes = [rol_requerido("padron", "edit")]

    def patch(self, request, pk):
        s = IngenieroPatchSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        if not s.validated_data:
            return Response({"ok": True, "noop": True})
        ing = padron.actualizar_ingeniero(pk, **s.validated_data)
        return Response(IngenieroSerializer(ing).data)


@api_view(["POST"])
@permission_classes([rol_requerido("padron", "sync")])
def sincronizar(request):
    """
    Endpoint: Sincronización masiva del padrón. Body: {"items": [...]}.
    """
    s = SincronizarPadronSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    count = padron.sincronizar_padron(s.validated_data["items"])
    logger.info("Sincronización solicitada por %s", request.user.colegiado)
    return Response({"ok": True, "count": count})


@api_view(["GET"])
@permission_classes([rol_requerido("padron", "view")])
def diagnostico(request):
    return Response({"ok": True, **padron.diagnostico_padron()})


@api_view(["POST"])
@permission_classes([rol_requerido("padron", "reset")])
def restablecer_password(request, pk):
    """
    Endpoint: Genera una contraseña nueva. Se muestra una sola vez.
    """
    password = padron.restablecer_password(pk)
    logger.info("Reset de contraseña del ingeniero %s por %s", pk, request.user.colegiado)
    return Response({"ok": True, "password": password})


@api_view(["POST"])
@permission_classes([rol_requerido("padron", "edit")])
def promover(request, colegiado):
    ing = padron.promover_admin(colegiado)
    return Response(IngenieroSerializer(ing).data)


@api_view(["POST"])
@permission_classes([rol_requerido("padron", "edit")])
def cambiar_estado(request, colegiado):
    """Activa o desactiva un colegiado. Body: {"activo": true|false}."""
    activo = request.data.get("activo")
    if not isinstance(activo, bool):
        raise SolicitudInvalida("El campo 'activo' debe ser booleano")
    ing = padron.cambiar_estado(colegiado, activo)
    return Response(IngenieroSerializer(ing).data)
