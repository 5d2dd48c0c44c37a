"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Rutas URL de la app 'votaciones': campañas, detalle, votos y
               opciones de candidatos.
--------------------------------------------------------------------------------
"""
from django.urls import path
from . import api

app_name = 'votaciones'  # Namespace para las URLs

urlpatterns = [
    path('', api.CampanasView.as_view(), name='campanas'),
    path('opciones/ingenieros/', api.opciones_ingenieros, name='opciones_ingenieros'),
    path('<int:pk>/', api.CampanaDetalleView.as_view(), name='campana'),
    path('<int:pk>/votar/', api.votar, name='votar'),
]
