"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Define el mapeo de URLs para la aplicación core.
--------------------------------------------------------------------------------
"""

# Importa función path para rutas.
from django.urls import path
from . import api

urlpatterns = [
    # Salud del servicio.
    path("health/", api.health, name="health"),
]
