"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Define señales (triggers) del sistema.
                       1. Normaliza email y DPI del Ingeniero antes de guardar
                          (vacío => NULL), para que los campos únicos opcionales
                          no choquen con cadenas vacías desde el panel admin.
--------------------------------------------------------------------------------
"""

# Importa señal pre-guardado.
from django.db.models.signals import pre_save
# Importa decorador receptor.
from django.dispatch import receiver

from core.models import Ingeniero
from core.validators import solo_digitos


@receiver(pre_save, sender=Ingeniero)
def normalizar_campos_unicos(sender, instance, **kwargs):
    """Email en minúsculas, DPI solo dígitos, vacíos como NULL."""
    # Email: "" => None, resto en minúsculas.
    instance.email = (instance.email or "").strip().lower() or None
    # DPI: se guarda solo con dígitos.
    instance.dpi = solo_digitos(instance.dpi) or None
    # Colegiado y nombre sin espacios sobrantes.
    instance.colegiado = (instance.colegiado or "").strip()
    instance.nombre = " ".join((instance.nombre or "").split())
