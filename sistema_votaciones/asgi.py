"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Configuración ASGI del proyecto. Expone la API HTTP para servidores 
               asíncronos (uvicorn, daphne). No hay WebSockets en este sistema.
--------------------------------------------------------------------------------
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'sistema_votaciones.settings')

application = get_asgi_application()
