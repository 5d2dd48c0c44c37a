"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Define endpoints de la API REST para funcionalidades 
                       del núcleo: chequeo de salud del servicio.
--------------------------------------------------------------------------------
"""

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):
    """Endpoint público para monitoreo (balanceadores, uptime)."""
    return Response({"ok": True, "time": timezone.now().isoformat()})
