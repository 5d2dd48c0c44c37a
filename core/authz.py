"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Contiene la lógica de autorización del sistema (RBAC).
                       Define 'can' para verificar si una sesión tiene permiso
                       para realizar una acción sobre un recurso, basándose en
                       la matriz de roles de roles.py, y una fábrica de
                       permisos DRF para proteger las vistas de la API.
--------------------------------------------------------------------------------
"""

# Importa la clase base de permisos de DRF.
from rest_framework.permissions import BasePermission
# Importa la matriz de configuración de permisos.
from core.roles import ROLE_MATRIX


def user_role(user) -> str | None:
    """Devuelve el rol de la sesión ('voter' | 'admin') o None."""
    return getattr(user, "rol", None)


def can(user, resource: str, action: str) -> bool:
    """
    Regla única de autorización:
    - Sesión no autenticada => False
    - Si no tiene rol => False
    - Si está en la matriz ROLE_MATRIX[resource][action] => True
    """
    # 1. Verifica que exista una sesión válida.
    if not (user and getattr(user, "is_authenticated", False)):
        return False

    # 2. Obtiene el rol desde el token.
    rol = user_role(user)
    if not rol:
        return False

    # 3. Consulta la matriz de permisos.
    allowed = ROLE_MATRIX.get(resource, {}).get(action, [])
    return rol in allowed


def rol_requerido(resource: str, action: str):
    """
    Fábrica de permisos DRF.
    Sin sesión => 401 (DRF lanza NotAuthenticated); rol fuera de la matriz => 403.
    """
    class _Permiso(BasePermission):
        message = "No tienes permisos para esta acción"

        def has_permission(self, request, view):
            return can(request.user, resource, action)

    _Permiso.__name__ = f"Puede_{resource}_{action}"
    return _Permiso


class EstaAutenticado(BasePermission):
    """Cualquier sesión válida, sin importar el rol."""

    def has_permission(self, request, view):
        return bool(request.user and getattr(request.user, "is_authenticated", False))
