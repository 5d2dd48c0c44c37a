"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Comando de gestión (management command) para cargar el padrón de 
               ingenieros desde uno o más archivos JSON. Cada archivo puede ser 
               una lista de registros o un objeto {"items": [...]}. Opcionalmente 
               promueve a un colegiado como administrador.
--------------------------------------------------------------------------------
"""
import json
import logging

from django.core.management.base import BaseCommand, CommandError  # Clase base para comandos
from django.db import DatabaseError
from rest_framework.exceptions import APIException

from core import padron

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    # Texto de ayuda que aparece al ejecutar python manage.py help importar_padron
    help = "Importa/sincroniza el padrón de ingenieros desde archivos JSON."

    def add_arguments(self, parser):
        parser.add_argument("archivos", nargs="+", help="Rutas a archivos JSON del padrón")
        parser.add_argument(
            "--admin",
            dest="admin",
            default=None,
            help="Colegiado a promover como administrador al terminar",
        )

    def _leer(self, ruta):
        try:
            with open(ruta, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise CommandError(f"No se pudo leer {ruta}: {e}")
        if isinstance(data, dict):
            data = data.get("items")
        if not isinstance(data, list):
            raise CommandError(f"{ruta}: se esperaba una lista o un objeto con 'items'")
        return data

    def handle(self, *args, **options):
        total = 0
        fallidos = 0

        # Cada archivo es un lote atómico; un lote fallido no detiene al resto
        for ruta in options["archivos"]:
            registros = self._leer(ruta)
            try:
                aplicados = padron.sincronizar_padron(registros)
            except APIException as e:
                fallidos += 1
                logger.warning("Lote %s rechazado: %s", ruta, e.detail)
                self.stdout.write(self.style.ERROR(f" - {ruta}: {e.detail}"))
                continue
            except DatabaseError as e:
                fallidos += 1
                logger.warning("Lote %s omitido por error de base de datos: %s", ruta, e)
                self.stdout.write(self.style.ERROR(f" - {ruta}: error de base de datos"))
                continue
            total += aplicados
            self.stdout.write(f" - {ruta}: {aplicados} registros")

        if options["admin"]:
            try:
                ing = padron.promover_admin(options["admin"])
            except APIException as e:
                raise CommandError(str(e.detail))
            self.stdout.write(f"Administrador: {ing.colegiado} - {ing.nombre}")

        mensaje = f"Padrón importado: {total} registros"
        if fallidos:
            self.stdout.write(self.style.WARNING(f"{mensaje} ({fallidos} archivo(s) con error)"))
        else:
            self.stdout.write(self.style.SUCCESS(mensaje))
