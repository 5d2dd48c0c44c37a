"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Define la Matriz de Roles y Permisos (ACL/RBAC).
                       Centraliza la configuración de qué roles (votante,
                       administrador) pueden acceder a qué recursos (campañas,
                       padrón) y qué acciones pueden realizar (ver, crear, votar).
--------------------------------------------------------------------------------
"""

# Importa tipos para anotaciones de tipo (Type Hinting).
from typing import Dict, List

# Roles que viajan en el token de sesión.
VOTANTE = "voter"
ADMIN = "admin"

ROLES = (VOTANTE, ADMIN)

# MATRIZ DE PERMISOS
# Estructura: Diccionario { "Recurso": { "Acción": [Lista de Roles Permitidos] } }
ROLE_MATRIX: Dict[str, Dict[str, List[str]]] = {
    "campanas": {
        "view":   [VOTANTE, ADMIN],  # Listado y detalle
        "create": [ADMIN],
        "edit":   [ADMIN],           # Campos, habilitación y candidatos
        "delete": [ADMIN],
        "vote":   [VOTANTE, ADMIN],  # El admin también es ingeniero colegiado
    },
    "padron": {
        "view":   [ADMIN],           # Listado, búsqueda y diagnóstico
        "edit":   [ADMIN],           # Editar ingeniero, promover
        "sync":   [ADMIN],           # Sincronización masiva
        "reset":  [ADMIN],           # Restablecer contraseña
    },
}
