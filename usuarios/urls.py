"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Mapeo de URLs para la aplicación Usuarios.
               - Autenticación (registro, login, login admin, sesión actual)
               - Estado público de colegiado
               - Administración del padrón de ingenieros
--------------------------------------------------------------------------------
"""
from django.urls import path
from . import api

urlpatterns = [
    # --- AUTENTICACIÓN ---
    path("auth/registro/", api.registro, name="auth_registro"),
    path("auth/login/", api.login, name="auth_login"),
    path("auth/admin/login/", api.admin_login, name="auth_admin_login"),
    path("auth/yo/", api.yo, name="auth_yo"),
    path("auth/padron/<str:colegiado>/estado/", api.estado_colegiado, name="estado_colegiado"),

    # --- PADRÓN (ADMIN) ---
    path("admin/ingenieros/", api.IngenierosAdminView.as_view(), name="admin_ingenieros"),
    path("admin/ingenieros/sincronizar/", api.sincronizar, name="admin_ingenieros_sincronizar"),
    path("admin/ingenieros/diagnostico/", api.diagnostico, name="admin_ingenieros_diagnostico"),
    path("admin/ingenieros/<int:pk>/", api.IngenieroAdminView.as_view(), name="admin_ingeniero"),
    path("admin/ingenieros/<int:pk>/restablecer-password/", api.restablecer_password, name="admin_ingeniero_reset"),
    path("admin/ingenieros/padron/<str:colegiado>/promover/", api.promover, name="admin_ingeniero_promover"),
    path("admin/ingenieros/padron/<str:colegiado>/estado/", api.cambiar_estado, name="admin_ingeniero_estado"),
]
