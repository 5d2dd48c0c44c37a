"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Configuración del panel de administración de Django para la app 
               'votaciones'. Registra campañas (con sus candidatos en línea), 
               candidatos y votos. Los votos son de solo lectura.
--------------------------------------------------------------------------------
"""
from django.contrib import admin  # Importa el módulo de administración
from .models import Campana, CampanaCandidato, Candidato, Voto  # Importa los modelos a registrar


class CampanaCandidatoInline(admin.TabularInline):
    model = CampanaCandidato
    extra = 0
    autocomplete_fields = ('candidato',)


@admin.register(Campana)
class CampanaAdmin(admin.ModelAdmin):
    list_display = ('titulo', 'inicia_en', 'termina_en', 'habilitada', 'votos_por_votante')
    list_filter = ('habilitada',)
    search_fields = ('titulo',)
    inlines = [CampanaCandidatoInline]


@admin.register(Candidato)
class CandidatoAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'ingeniero')
    search_fields = ('nombre', 'ingeniero__colegiado')
    raw_id_fields = ('ingeniero',)


@admin.register(Voto)
class VotoAdmin(admin.ModelAdmin):
    list_display = ('campana', 'candidato', 'votante', 'creado')
    list_filter = ('campana',)

    # El registro de votos es inmutable
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
