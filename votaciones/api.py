"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Definición de endpoints API para el módulo de Votaciones.
               Maneja el listado y detalle de campañas con sus conteos, la
               administración de campañas y candidatos, y el registro de votos.
--------------------------------------------------------------------------------
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from core import padron
from core.authz import rol_requerido

from . import repositorio, votos
from .serializers import CampanaSerializer, VotoSerializer


def _permisos_por_metodo(view, acciones):
    """Instancia el permiso de la matriz según el método HTTP."""
    accion = acciones.get(view.request.method, "view")
    return [rol_requerido("campanas", accion)()]


class CampanasView(APIView):
    """
    GET: listado de campañas con conteos y cupo del usuario.
    POST: creación de campaña (solo administradores).
    """
    acciones = {"GET": "view", "POST": "create"}

    def get_permissions(self):
        return _permisos_por_metodo(self, self.acciones)

    def get(self, request):
        data = repositorio.listar_campanas(votante_id=request.user.id, rol=request.user.rol)
        return Response(data)

    def post(self, request):
        s = CampanaSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        datos = dict(s.validated_data)
        candidatos = datos.pop("candidatos", [])
        data = repositorio.crear_campana(datos, candidatos)
        return Response(data, status=status.HTTP_201_CREATED)


class CampanaDetalleView(APIView):
    """
    GET: detalle de una campaña.
    PATCH: edición parcial y reemplazo de candidatos.
    DELETE: eliminación con sus votos y vínculos.
    """
    acciones = {"GET": "view", "PATCH": "edit", "DELETE": "delete"}

    def get_permissions(self):
        return _permisos_por_metodo(self, self.acciones)

    def get(self, request, pk):
        data = repositorio.obtener_campana(pk, votante_id=request.user.id, rol=request.user.rol)
        return Response(data)

    def patch(self, request, pk):
        s = CampanaSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        datos = dict(s.validated_data)
        candidatos = datos.pop("candidatos", None)
        repositorio.actualizar_campana(pk, datos, candidatos)
        # Se relee con el usuario para incluir su cupo
        data = repositorio.obtener_campana(pk, votante_id=request.user.id, rol=request.user.rol)
        return Response(data)

    def delete(self, request, pk):
        repositorio.eliminar_campana(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["POST"])
@permission_classes([rol_requerido("campanas", "vote")])
def votar(request, pk: int):
    """
    Endpoint: Registra el voto del usuario por un candidato de la campaña.
    Retorna los conteos actualizados y el cupo usado/disponible.
    """
    s = VotoSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    resultado = votos.emitir_voto(pk, s.validated_data["candidato_id"], request.user.id)
    return Response(resultado.como_dict())


@api_view(["GET"])
@permission_classes([rol_requerido("campanas", "create")])
def opciones_ingenieros(request):
    """
    Endpoint: Ingenieros activos seleccionables como candidatos (?q= para buscar).
    """
    return Response(padron.opciones_candidatos(request.query_params.get("q", "")))
