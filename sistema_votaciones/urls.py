"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Archivo principal de enrutamiento URL del proyecto. Define las rutas 
               maestras que delegan a las URLs específicas de cada aplicación 
               (core, usuarios, votaciones).
--------------------------------------------------------------------------------
"""
from django.contrib import admin
from django.urls import path, include

# Lista de patrones de URL
urlpatterns = [
    path('admin/', admin.site.urls), # Panel de administración de Django
    path("api/", include("core.urls")),  # Salud del servicio
    path("api/", include("usuarios.urls")),  # Autenticación y padrón
    path("api/campanas/", include("votaciones.urls")), # Campañas y votos
]
