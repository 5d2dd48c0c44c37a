"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Configuración de la aplicación 'votaciones'.
--------------------------------------------------------------------------------
"""
from django.apps import AppConfig  # Importa clase base de configuración

class VotacionesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'  # Tipo de clave primaria
    name = 'votaciones'  # Nombre de la aplicación
    verbose_name = "Votaciones"
