from datetime import date

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from core.models import Ingeniero
from core.sesiones import emitir_token, verificar_token

PASSWORD = "Segura#2026"


class BaseUsuariosTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.ing = Ingeniero.objects.create(
            colegiado="1001",
            nombre="JOSÉ PÉREZ",
            dpi="1234567890123",
            fecha_nacimiento=date(1990, 5, 17),
        )

    def datos_registro(self, **extra):
        datos = {
            "colegiado": "1001",
            "nombre": "jose  perez",
            "email": "Jose@Colegio.gt",
            "dpi": "1234567890123",
            "fecha_nacimiento": "1990-05-17",
            "password": PASSWORD,
        }
        datos.update(extra)
        return datos

    def registrar(self, **extra):
        return self.client.post(reverse("auth_registro"), self.datos_registro(**extra), format="json")

    def autenticar(self, ing, rol):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {emitir_token(ing, rol)}")


# ==========================================
# 1. REGISTRO
# ==========================================
class RegistroTest(BaseUsuariosTest):

    def test_registro_exitoso(self):
        """CP-REG-001: Registro con datos que coinciden con el padrón (nombre sin tildes)."""
        response = self.registrar()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["colegiado"], "1001")
        # Se conserva el nombre del padrón
        self.assertEqual(response.data["nombre"], "JOSÉ PÉREZ")

        self.ing.refresh_from_db()
        self.assertTrue(self.ing.tiene_cuenta)
        self.assertTrue(self.ing.check_password(PASSWORD))
        self.assertEqual(self.ing.email, "jose@colegio.gt")

    def test_registro_fecha_latam(self):
        """CP-REG-002: La fecha DD/MM/YYYY también se acepta."""
        response = self.registrar(fecha_nacimiento="17/05/1990")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_registro_doble(self):
        """CP-REG-003: Un colegiado solo puede registrarse una vez."""
        self.assertEqual(self.registrar().status_code, status.HTTP_201_CREATED)
        response = self.registrar(email="otro@colegio.gt")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "El colegiado ya tiene una cuenta")
        self.assertEqual(response.data["tipo"], "Conflict")

    def test_nombre_no_coincide(self):
        """CP-REG-004: Nombre distinto al del padrón => 403."""
        response = self.registrar(nombre="Juan Perez")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "El nombre no coincide con el padrón")
        self.ing.refresh_from_db()
        self.assertFalse(self.ing.tiene_cuenta)

    def test_colegiado_fuera_del_padron(self):
        response = self.registrar(colegiado="9999")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "Colegiado no autorizado para registrarse")

    def test_colegiado_inactivo(self):
        self.ing.activo = False
        self.ing.save()
        response = self.registrar()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_dpi_y_fecha_no_coinciden(self):
        """CP-REG-005: DPI o fecha distintos al padrón => 400."""
        response = self.registrar(dpi="9999999999999")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "DPI no coincide con el padrón")

        response = self.registrar(fecha_nacimiento="1990-05-18")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Fecha de nacimiento no coincide con el padrón")

    def test_fecha_invalida(self):
        response = self.registrar(fecha_nacimiento="31/02/1990")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Fecha de nacimiento inválida")

    def test_padron_incompleto(self):
        Ingeniero.objects.create(colegiado="2002", nombre="ANA LOPEZ")
        response = self.registrar(colegiado="2002", nombre="Ana Lopez")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_password_debil(self):
        response = self.registrar(password="debil123")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data["campos"])
        self.ing.refresh_from_db()
        self.assertFalse(self.ing.tiene_cuenta)

    def test_email_duplicado(self):
        Ingeniero.objects.create(colegiado="2002", nombre="ANA LOPEZ", email="jose@colegio.gt")
        response = self.registrar()
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "El correo ya está registrado")

    def test_estado_colegiado(self):
        url = reverse("estado_colegiado", args=["1001"])
        self.assertFalse(self.client.get(url).data["tiene_cuenta"])
        self.registrar()
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["existe_en_padron"])
        self.assertTrue(response.data["tiene_cuenta"])


# ==========================================
# 2. LOGIN
# ==========================================
class LoginTest(BaseUsuariosTest):
    def setUp(self):
        super().setUp()
        self.registrar()
        self.url = reverse("auth_login")

    def login(self, **extra):
        datos = {
            "colegiado": "1001",
            "dpi": "1234567890123",
            "fecha_nacimiento": "17/05/1990",
            "password": PASSWORD,
        }
        datos.update(extra)
        return self.client.post(self.url, datos, format="json")

    def test_login_exitoso(self):
        """CP-LOG-001: Login correcto entrega token con rol de votante."""
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        sesion = verificar_token(response.data["token"])
        self.assertEqual(sesion.rol, "voter")
        self.assertEqual(sesion.colegiado, "1001")

    def test_login_dpi_con_guiones(self):
        self.assertEqual(self.login(dpi="1234-56789-0123").status_code, status.HTTP_200_OK)

    def test_login_fallido_respuesta_uniforme(self):
        """CP-LOG-002: Cualquier dato incorrecto responde el mismo 401."""
        casos = [
            {"dpi": "1111111111111"},
            {"fecha_nacimiento": "1990-01-01"},
            {"password": "Otra#Clave99"},
            {"colegiado": "424242"},
        ]
        for extra in casos:
            with self.subTest(extra=extra):
                response = self.login(**extra)
                self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
                self.assertEqual(response.data["error"], "Credenciales inválidas")
                self.assertNotIn("token", response.data)

    def test_login_inactivo(self):
        Ingeniero.objects.filter(pk=self.ing.pk).update(activo=False)
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "Credenciales inválidas")

    def test_login_sin_cuenta(self):
        Ingeniero.objects.create(
            colegiado="3003", nombre="SIN CUENTA", dpi="3333333333333", fecha_nacimiento=date(1980, 1, 1)
        )
        response = self.login(colegiado="3003", dpi="3333333333333", fecha_nacimiento="1980-01-01")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_padron_sin_dpi(self):
        """CP-LOG-004: Sin DPI en el padrón ningún DPI ingresado es válido."""
        sin_dpi = Ingeniero.objects.create(
            colegiado="4004", nombre="SIN DPI", fecha_nacimiento=date(1985, 3, 3)
        )
        sin_dpi.set_password(PASSWORD)
        sin_dpi.save()

        for dpi in ("abc", "---", "0000000000000"):
            with self.subTest(dpi=dpi):
                response = self.login(colegiado="4004", dpi=dpi, fecha_nacimiento="1985-03-03")
                self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
                self.assertEqual(response.data["error"], "Credenciales inválidas")

    def test_login_dpi_sin_digitos(self):
        response = self.login(dpi="sin-numeros")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_campos_faltantes(self):
        response = self.client.post(self.url, {"colegiado": "1001"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_yo_con_token_de_login(self):
        token = self.login().data["token"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(reverse("auth_yo"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["nombre"], "JOSÉ PÉREZ")


class AdminLoginTest(BaseUsuariosTest):
    def setUp(self):
        super().setUp()
        self.admin = Ingeniero.objects.create(colegiado="9000", nombre="ADMIN", email="admin@colegio.gt", is_admin=True)
        self.admin.set_password(PASSWORD)
        self.admin.save()
        self.url = reverse("auth_admin_login")

    def test_login_admin_por_colegiado_y_email(self):
        """CP-LOG-003: El administrador entra con colegiado o email."""
        for identificador in ({"colegiado": "9000"}, {"email": "ADMIN@colegio.gt"}, {"usuario": "9000"}):
            with self.subTest(identificador=identificador):
                response = self.client.post(self.url, {**identificador, "password": PASSWORD}, format="json")
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertEqual(verificar_token(response.data["token"]).rol, "admin")

    def test_login_admin_rechaza_votante(self):
        self.registrar()
        response = self.client.post(self.url, {"colegiado": "1001", "password": PASSWORD}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "Credenciales inválidas")

    def test_login_admin_password_incorrecta(self):
        response = self.client.post(self.url, {"colegiado": "9000", "password": "Mala#Clave1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


# ==========================================
# 3. ADMINISTRACIÓN DEL PADRÓN
# ==========================================
class PadronAdminApiTest(BaseUsuariosTest):
    def setUp(self):
        super().setUp()
        self.admin = Ingeniero.objects.create(colegiado="9000", nombre="ADMIN", is_admin=True)
        self.autenticar(self.admin, "admin")

    def test_votante_no_accede(self):
        """CP-ADM-001: Un votante recibe 403 y sin token 401."""
        self.autenticar(self.ing, "voter")
        self.assertEqual(self.client.get(reverse("admin_ingenieros")).status_code, status.HTTP_403_FORBIDDEN)
        self.client.credentials()
        self.assertEqual(self.client.get(reverse("admin_ingenieros")).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_listado_con_busqueda(self):
        response = self.client.get(reverse("admin_ingenieros"), {"q": "PÉREZ"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i["colegiado"] for i in response.data], ["1001"])
        self.assertNotIn("password_hash", response.data[0])

        response = self.client.get(reverse("admin_ingenieros"), {"is_admin": "true"})
        self.assertEqual([i["colegiado"] for i in response.data], ["9000"])

    def test_sincronizar(self):
        """CP-ADM-002: Sincronización masiva vía API."""
        items = [
            {"colegiado": "1001", "nombre": "José Pérez Gómez"},
            {"colegiado": "1002", "nombre": "Nuevo Ingeniero", "fechaNacimiento": "01/02/1985"},
        ]
        response = self.client.post(reverse("admin_ingenieros_sincronizar"), {"items": items}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"ok": True, "count": 2})
        self.assertEqual(Ingeniero.objects.get(colegiado="1002").fecha_nacimiento, date(1985, 2, 1))
        # El DPI no viene en el lote y se conserva
        self.assertEqual(Ingeniero.objects.get(colegiado="1001").dpi, "1234567890123")

    def test_sincronizar_formato_invalido(self):
        response = self.client.post(reverse("admin_ingenieros_sincronizar"), {"items": "x"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_email_duplicado(self):
        """CP-ADM-003: Editar con un email ya usado => 409."""
        Ingeniero.objects.create(colegiado="2002", nombre="ANA", email="ana@colegio.gt")
        url = reverse("admin_ingeniero", args=[self.ing.pk])
        response = self.client.patch(url, {"email": "ana@colegio.gt"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "Email duplicado")

    def test_patch_vacio_y_password_debil(self):
        url = reverse("admin_ingeniero", args=[self.ing.pk])
        self.assertTrue(self.client.patch(url, {}, format="json").data["noop"])
        response = self.client.patch(url, {"password": "solominusculas"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Password débil")

    def test_patch_ingeniero_inexistente(self):
        response = self.client.patch(reverse("admin_ingeniero", args=[99999]), {"nombre": "Nadie"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_restablecer_password(self):
        """CP-ADM-004: La contraseña generada permite iniciar sesión."""
        response = self.client.post(reverse("admin_ingeniero_reset", args=[self.ing.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        nueva = response.data["password"]

        self.client.credentials()
        login = self.client.post(
            reverse("auth_login"),
            {"colegiado": "1001", "dpi": "1234567890123", "fecha_nacimiento": "1990-05-17", "password": nueva},
            format="json",
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)

    def test_promover_y_cambiar_estado(self):
        response = self.client.post(reverse("admin_ingeniero_promover", args=["1001"]))
        self.assertTrue(response.data["is_admin"])

        url = reverse("admin_ingeniero_estado", args=["1001"])
        response = self.client.post(url, {"activo": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["activo"])

        response = self.client.post(url, {"activo": "no"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_diagnostico(self):
        response = self.client.get(reverse("admin_ingenieros_diagnostico"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 2)
        self.assertEqual(response.data["admins"], 1)
