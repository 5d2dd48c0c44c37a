"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Filtros (django-filter) para el listado administrativo del padrón:
               búsqueda libre por nombre, colegiado o email y filtro por estado.
--------------------------------------------------------------------------------
"""
import django_filters
from django.db.models import Q

from core.models import Ingeniero


class IngenieroFilter(django_filters.FilterSet):
    q = django_filters.CharFilter(method="filtrar_texto")
    activo = django_filters.BooleanFilter(field_name="activo")
    is_admin = django_filters.BooleanFilter(field_name="is_admin")

    class Meta:
        model = Ingeniero
        fields = ["q", "activo", "is_admin"]

    def filtrar_texto(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(nombre__icontains=value) | Q(colegiado__icontains=value) | Q(email__icontains=value)
        )
