import json
import os
import subprocess
import sys
import tempfile
from datetime import date
from io import StringIO

from django.conf import settings
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from core import padron
from core.authz import can
from core.excepciones import Conflicto, NoAutorizado, NoEncontrado, SolicitudInvalida
from core.models import Ingeniero
from core.sesiones import Sesion, emitir_token, verificar_token
from core.validators import (
    normalizar_fecha,
    normalizar_nombre,
    password_es_fuerte,
    solo_digitos,
)


# ==========================================
# 0. ARRANQUE DEL PROYECTO
# ==========================================
SCRIPT_ARRANQUE = """
import django
django.setup()
from django.core.management import call_command
from django.test import Client
call_command("check")
r = Client().get("/api/health/")
print(r.status_code, r.json()["ok"])
"""


class ArranqueTest(SimpleTestCase):
    """Arranca Django en un intérprete limpio: nada de DRF importado de antemano."""

    def test_health_en_interprete_limpio(self):
        """CP-ARR-001: settings -> autenticación -> excepciones carga sin ciclos."""
        entorno = dict(os.environ)
        entorno["DJANGO_SETTINGS_MODULE"] = "sistema_votaciones.settings"
        entorno["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(settings.BASE_DIR), entorno.get("PYTHONPATH")) if p
        )
        resultado = subprocess.run(
            [sys.executable, "-c", SCRIPT_ARRANQUE],
            cwd=settings.BASE_DIR,
            env=entorno,
            capture_output=True,
            text=True,
            timeout=120,
        )
        self.assertEqual(resultado.returncode, 0, resultado.stderr)
        self.assertIn("200 True", resultado.stdout)


# ==========================================
# 1. PRUEBAS UNITARIAS (Normalización)
# ==========================================
class NormalizacionTest(TestCase):
    HOY = date(2026, 10, 19)

    def test_fecha_iso(self):
        """PU-01: YYYY-MM-DD se acepta tal cual."""
        self.assertEqual(normalizar_fecha("1990-05-17"), date(1990, 5, 17))

    def test_fecha_latam_cuatro_digitos(self):
        """PU-02: DD/MM/YYYY se convierte a fecha."""
        self.assertEqual(normalizar_fecha("17/05/1990"), date(1990, 5, 17))

    def test_fecha_latam_dos_digitos_siglo(self):
        """PU-03: DD/MM/YY infiere el siglo según el año actual."""
        self.assertEqual(normalizar_fecha("05/03/26", hoy=self.HOY), date(2026, 3, 5))
        self.assertEqual(normalizar_fecha("05/03/00", hoy=self.HOY), date(2000, 3, 5))
        self.assertEqual(normalizar_fecha("05/03/27", hoy=self.HOY), date(1927, 3, 5))
        self.assertEqual(normalizar_fecha("05/03/90", hoy=self.HOY), date(1990, 3, 5))

    def test_fecha_invalida(self):
        """PU-04: Formatos desconocidos o fechas imposibles retornan None."""
        self.assertIsNone(normalizar_fecha("31/02/1990"))
        self.assertIsNone(normalizar_fecha("1990-13-01"))
        self.assertIsNone(normalizar_fecha("mayo 1990"))
        self.assertIsNone(normalizar_fecha(""))

    def test_nombre_sin_tildes_ni_espacios(self):
        """PU-05: La comparación de nombres ignora tildes, mayúsculas y espacios."""
        self.assertEqual(normalizar_nombre("  José   Pérez  "), "JOSE PEREZ")
        self.assertEqual(normalizar_nombre("Núñez"), normalizar_nombre("NUNEZ"))

    def test_solo_digitos(self):
        self.assertEqual(solo_digitos("1234-56789-0123"), "1234567890123")
        self.assertEqual(solo_digitos(None), "")

    def test_password_fuerte(self):
        """PU-06: Política de contraseñas."""
        self.assertTrue(password_es_fuerte("Segura#2026"))
        self.assertFalse(password_es_fuerte("Corta#1"))
        self.assertFalse(password_es_fuerte("sinmayuscula#1"))
        self.assertFalse(password_es_fuerte("SINMINUSCULA#1"))
        self.assertFalse(password_es_fuerte("SinNumero#"))
        self.assertFalse(password_es_fuerte("SinSimbolo12"))


# ==========================================
# 2. SESIONES Y AUTORIZACIÓN
# ==========================================
class SesionesTest(TestCase):
    def setUp(self):
        self.ing = Ingeniero.objects.create(colegiado="1001", nombre="JANE DOE")

    def test_token_ida_y_vuelta(self):
        """CP-AUT-001: El token emitido se verifica y conserva los datos."""
        sesion = verificar_token(emitir_token(self.ing, "voter"))
        self.assertEqual(sesion.id, self.ing.pk)
        self.assertEqual(sesion.rol, "voter")
        self.assertEqual(sesion.colegiado, "1001")
        self.assertEqual(sesion.nombre, "JANE DOE")

    def test_sesion_solo_lleva_datos_del_token(self):
        """El rol decide los permisos; la sesión no trae atajos propios."""
        sesion = verificar_token(emitir_token(self.ing, "admin"))
        self.assertEqual(set(sesion.como_dict()), {"id", "rol", "colegiado", "nombre", "email"})
        self.assertFalse(hasattr(sesion, "es_admin"))
        self.assertTrue(can(sesion, "padron", "sync"))

    def test_token_alterado(self):
        """CP-AUT-002: Un token manipulado es rechazado."""
        token = emitir_token(self.ing, "voter")
        with self.assertRaisesMessage(NoAutorizado, "Token inválido"):
            verificar_token(token + "x")

    @override_settings(SESION_DURACION_SEGUNDOS=-1)
    def test_token_expirado(self):
        """CP-AUT-003: Un token vencido es rechazado como expirado."""
        token = emitir_token(self.ing, "voter")
        with self.assertRaisesMessage(NoAutorizado, "Token expirado"):
            verificar_token(token)

    def test_matriz_de_roles(self):
        votante = Sesion(id=1, rol="voter", colegiado="1", nombre="A")
        admin = Sesion(id=2, rol="admin", colegiado="2", nombre="B")
        self.assertTrue(can(votante, "campanas", "vote"))
        self.assertFalse(can(votante, "campanas", "create"))
        self.assertTrue(can(admin, "campanas", "create"))
        self.assertTrue(can(admin, "padron", "sync"))
        self.assertFalse(can(None, "campanas", "view"))


class AutenticacionBearerTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.ing = Ingeniero.objects.create(colegiado="1001", nombre="JANE DOE")
        self.url = reverse("auth_yo")

    def test_sin_token_401(self):
        """CP-AUT-004: Sin encabezado Authorization la API responde 401."""
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response["WWW-Authenticate"], "Bearer")
        self.assertEqual(response.data["tipo"], "Unauthorized")
        self.assertFalse(response.data["ok"])

    def test_token_invalido_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer basura")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "Token inválido")

    @override_settings(SESION_DURACION_SEGUNDOS=-1)
    def test_token_expirado_401(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {emitir_token(self.ing, 'voter')}")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "Token expirado")

    def test_token_valido(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {emitir_token(self.ing, 'admin')}")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["colegiado"], "1001")
        self.assertEqual(response.data["rol"], "admin")

    def test_health_publico(self):
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["ok"])


# ==========================================
# 3. PADRÓN (Roster Store)
# ==========================================
class PadronTest(TestCase):
    def test_sincronizar_crea_y_es_idempotente(self):
        """CP-PAD-001: Sincronizar dos veces el mismo lote deja el mismo estado."""
        lote = [
            {"colegiado": "1001", "nombre": "Jane Doe", "dpi": "1234567890123", "fecha_nacimiento": "17/05/1990"},
            {"colegiado": "1002", "nombre": "John Roe", "activo": False},
        ]
        self.assertEqual(padron.sincronizar_padron(lote), 2)
        antes = list(Ingeniero.objects.order_by("colegiado").values())
        self.assertEqual(padron.sincronizar_padron(lote), 2)
        despues = list(Ingeniero.objects.order_by("colegiado").values())

        self.assertEqual(antes, despues)
        self.assertEqual(Ingeniero.objects.count(), 2)
        jane = Ingeniero.objects.get(colegiado="1001")
        self.assertEqual(jane.fecha_nacimiento, date(1990, 5, 17))
        self.assertFalse(Ingeniero.objects.get(colegiado="1002").activo)

    def test_sincronizar_no_pisa_con_nulos(self):
        """CP-PAD-002: Un valor ausente no borra el valor guardado (COALESCE)."""
        padron.sincronizar_padron([
            {"colegiado": "1001", "nombre": "Jane Doe", "dpi": "1234567890123", "fecha_nacimiento": "1990-05-17"},
        ])
        padron.sincronizar_padron([{"colegiado": "1001", "nombre": "Jane M. Doe", "activo": False}])

        jane = Ingeniero.objects.get(colegiado="1001")
        self.assertEqual(jane.nombre, "Jane M. Doe")
        self.assertFalse(jane.activo)
        self.assertEqual(jane.dpi, "1234567890123")
        self.assertEqual(jane.fecha_nacimiento, date(1990, 5, 17))

    def test_sincronizar_conflicto_es_atomico(self):
        """CP-PAD-003: Email duplicado => Conflicto y no se aplica nada del lote."""
        Ingeniero.objects.create(colegiado="1001", nombre="A", email="a@colegio.gt")
        with self.assertRaises(Conflicto):
            padron.sincronizar_padron([
                {"colegiado": "2001", "nombre": "Nuevo"},
                {"colegiado": "2002", "nombre": "Otro", "email": "A@colegio.gt"},
            ])
        self.assertFalse(Ingeniero.objects.filter(colegiado="2001").exists())

    def test_sincronizar_fecha_invalida(self):
        with self.assertRaises(SolicitudInvalida):
            padron.sincronizar_padron([{"colegiado": "1001", "nombre": "A", "fecha_nacimiento": "99/99/9999"}])
        self.assertEqual(Ingeniero.objects.count(), 0)

    def test_emails_vacios_no_chocan(self):
        """Email vacío se guarda como NULL y puede repetirse."""
        Ingeniero.objects.create(colegiado="1", nombre="A", email="")
        Ingeniero.objects.create(colegiado="2", nombre="B", email="")
        self.assertEqual(Ingeniero.objects.filter(email__isnull=True).count(), 2)

    def test_estado_y_promocion(self):
        Ingeniero.objects.create(colegiado="1001", nombre="A")
        self.assertFalse(padron.cambiar_estado("1001", False).activo)
        self.assertTrue(padron.promover_admin("1001").is_admin)
        with self.assertRaises(NoEncontrado):
            padron.promover_admin("9999")

    def test_buscar_por_email_o_colegiado(self):
        ing = Ingeniero.objects.create(colegiado="1001", nombre="A", email="admin@colegio.gt")
        self.assertEqual(padron.buscar_por_email_o_colegiado("1001"), ing)
        self.assertEqual(padron.buscar_por_email_o_colegiado("ADMIN@colegio.gt"), ing)
        self.assertIsNone(padron.buscar_por_email_o_colegiado("nadie@colegio.gt"))

    def test_restablecer_password(self):
        """CP-PAD-004: La contraseña generada es fuerte y queda vigente."""
        ing = Ingeniero.objects.create(colegiado="1001", nombre="A")
        nueva = padron.restablecer_password(ing.pk)
        self.assertTrue(password_es_fuerte(nueva))
        ing.refresh_from_db()
        self.assertTrue(ing.check_password(nueva))

    def test_actualizar_email_duplicado(self):
        Ingeniero.objects.create(colegiado="1", nombre="A", email="a@colegio.gt")
        b = Ingeniero.objects.create(colegiado="2", nombre="B")
        with self.assertRaisesMessage(Conflicto, "Email duplicado"):
            padron.actualizar_ingeniero(b.pk, email="a@colegio.gt")

    def test_estado_colegiado(self):
        Ingeniero.objects.create(colegiado="1001", nombre="A")
        self.assertEqual(
            padron.estado_colegiado("1001"),
            {"existe_en_padron": True, "activo": True, "tiene_cuenta": False},
        )
        self.assertFalse(padron.estado_colegiado("5555")["existe_en_padron"])
        with self.assertRaises(SolicitudInvalida):
            padron.estado_colegiado("abc")


class ImportarPadronCommandTest(TestCase):
    def _archivo(self, contenido):
        fd, ruta = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(contenido, fh)
        self.addCleanup(os.remove, ruta)
        return ruta

    def test_importa_y_promueve(self):
        """CP-PAD-005: El comando importa listas y objetos {items} y promueve admin."""
        a = self._archivo([{"colegiado": "1001", "nombre": "Jane Doe"}])
        b = self._archivo({"items": [{"colegiado": "1002", "nombre": "John Roe"}]})
        out = StringIO()
        call_command("importar_padron", a, b, admin="1002", stdout=out)

        self.assertEqual(Ingeniero.objects.count(), 2)
        self.assertTrue(Ingeniero.objects.get(colegiado="1002").is_admin)
        self.assertIn("Padrón importado: 2 registros", out.getvalue())

    def test_lote_con_error_no_detiene_al_resto(self):
        Ingeniero.objects.create(colegiado="1", nombre="A", email="a@colegio.gt")
        malo = self._archivo([{"colegiado": "2", "nombre": "B", "email": "a@colegio.gt"}])
        bueno = self._archivo([{"colegiado": "3", "nombre": "C"}])
        out = StringIO()
        call_command("importar_padron", malo, bueno, stdout=out)

        self.assertFalse(Ingeniero.objects.filter(colegiado="2").exists())
        self.assertTrue(Ingeniero.objects.filter(colegiado="3").exists())
        self.assertIn("1 archivo(s) con error", out.getvalue())
