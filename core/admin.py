"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Configura el panel de administración para el modelo 
                       Ingeniero. Permite ver colegiado, nombre y estado en la
                       lista, y filtrar/buscar por esos campos.
--------------------------------------------------------------------------------
"""

# Importa módulo admin.
from django.contrib import admin
# Importa modelo Ingeniero.
from .models import Ingeniero

# Registra Ingeniero con configuración personalizada.
@admin.register(Ingeniero)
class IngenieroAdmin(admin.ModelAdmin):
    # Columnas visibles en la lista.
    list_display = ('colegiado', 'nombre', 'email', 'activo', 'is_admin', 'tiene_cuenta')
    # Filtros laterales.
    list_filter = ('activo', 'is_admin')
    # Campos de búsqueda.
    search_fields = ('colegiado', 'nombre', 'email', 'dpi')
    # El hash nunca se edita desde aquí (usar restablecer contraseña).
    readonly_fields = ('creado', 'actualizado')

    @admin.display(boolean=True, description="Cuenta")
    def tiene_cuenta(self, obj):
        return obj.tiene_cuenta
