"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Comando de gestión (management command) que deshabilita todas las 
               campañas cuyo cierre ya pasó. Hace la misma corrección que las 
               lecturas, pero a demanda (por ejemplo desde cron).
--------------------------------------------------------------------------------
"""
from django.core.management.base import BaseCommand  # Clase base para crear comandos personalizados

from votaciones.ciclo import barrer_vencidas


class Command(BaseCommand):
    help = "Deshabilita las campañas vencidas que siguen marcadas como habilitadas."

    def handle(self, *args, **options):
        n = barrer_vencidas()
        self.stdout.write(self.style.SUCCESS(f"Campañas deshabilitadas: {n}"))
