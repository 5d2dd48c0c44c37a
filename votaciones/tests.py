import threading
from datetime import timedelta
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from core.excepciones import Conflicto, NoEncontrado, Prohibido, SolicitudInvalida
from core.models import Ingeniero
from core.sesiones import emitir_token

from . import repositorio, votos
from .ciclo import EstadoCampana, barrer_vencidas, corregir_si_vencida, evaluar_estado, puede_votar
from .models import Campana, CampanaCandidato, Candidato, Voto


# ==========================================
# 1. PRUEBAS UNITARIAS (Ciclo de vida)
# ==========================================
class CicloCampanaTest(TestCase):
    def setUp(self):
        self.inicio = timezone.now()
        self.fin = self.inicio + timedelta(hours=2)

    def test_estados(self):
        """PU-CIC-01: Estado según hora actual y habilitación."""
        antes = self.inicio - timedelta(seconds=1)
        durante = self.inicio + timedelta(hours=1)
        despues = self.fin + timedelta(seconds=1)

        self.assertEqual(evaluar_estado(True, self.inicio, self.fin, antes), EstadoCampana.PENDIENTE)
        self.assertEqual(evaluar_estado(True, self.inicio, self.fin, durante), EstadoCampana.ACTIVA)
        self.assertEqual(evaluar_estado(False, self.inicio, self.fin, durante), EstadoCampana.DESHABILITADA)
        self.assertEqual(evaluar_estado(True, self.inicio, self.fin, despues), EstadoCampana.FINALIZADA)
        # El tiempo manda sobre la habilitación
        self.assertEqual(evaluar_estado(False, self.inicio, self.fin, antes), EstadoCampana.PENDIENTE)
        self.assertEqual(evaluar_estado(False, self.inicio, self.fin, despues), EstadoCampana.FINALIZADA)

    def test_limites_inclusivos(self):
        """PU-CIC-02: Inicio y cierre exactos cuentan como activa."""
        self.assertEqual(evaluar_estado(True, self.inicio, self.fin, self.inicio), EstadoCampana.ACTIVA)
        self.assertEqual(evaluar_estado(True, self.inicio, self.fin, self.fin), EstadoCampana.ACTIVA)

    def test_puede_votar(self):
        self.assertTrue(puede_votar(EstadoCampana.ACTIVA, 1, "voter"))
        self.assertTrue(puede_votar(EstadoCampana.ACTIVA, 1, "admin"))
        self.assertFalse(puede_votar(EstadoCampana.ACTIVA, 0, "voter"))
        self.assertFalse(puede_votar(EstadoCampana.PENDIENTE, 1, "voter"))
        self.assertFalse(puede_votar(EstadoCampana.ACTIVA, 1, None))


class BaseVotacionesTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.ahora = timezone.now()
        self.votante = Ingeniero.objects.create(colegiado="1001", nombre="JANE DOE")
        self.admin = Ingeniero.objects.create(colegiado="9000", nombre="ADMIN", is_admin=True)

    def crear_campana(self, candidatos=("Alice", "Bob"), **extra):
        datos = {
            "titulo": "Junta Directiva 2026",
            "votos_por_votante": 1,
            "inicia_en": self.ahora - timedelta(hours=1),
            "termina_en": self.ahora + timedelta(hours=1),
        }
        datos.update(extra)
        vista = repositorio.crear_campana(datos, list(candidatos))
        campana = Campana.objects.get(pk=vista["id"])
        ids = [c["id"] for c in vista["candidatos"]]
        return campana, ids

    def autenticar(self, ing, rol):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {emitir_token(ing, rol)}")


class AutoDeshabilitarTest(BaseVotacionesTest):
    def vencida(self):
        # Directo en la BD: crear_campana relee y ya la corregiría
        return Campana.objects.create(
            titulo="Vencida",
            votos_por_votante=1,
            habilitada=True,
            inicia_en=self.ahora - timedelta(days=2),
            termina_en=self.ahora - timedelta(days=1),
        )

    def test_detalle_corrige_campana_vencida(self):
        """CP-CIC-001: Leer una campaña vencida la deshabilita en la BD."""
        campana = self.vencida()
        self.autenticar(self.votante, "voter")
        response = self.client.get(reverse("votaciones:campana", args=[campana.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["estado"], "finalizada")
        self.assertFalse(response.data["habilitada"])
        self.assertFalse(response.data["puede_votar"])
        campana.refresh_from_db()
        self.assertFalse(campana.habilitada)

    def test_listado_corrige_en_bloque(self):
        vieja = self.vencida()
        vigente, _ = self.crear_campana(titulo="Vigente")
        self.autenticar(self.votante, "voter")
        response = self.client.get(reverse("votaciones:campanas"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c["id"] for c in response.data], [vigente.pk, vieja.pk])
        self.assertFalse(Campana.objects.get(pk=vieja.pk).habilitada)
        self.assertTrue(Campana.objects.get(pk=vigente.pk).habilitada)

    def test_falla_de_correccion_no_rompe_la_lectura(self):
        """CP-CIC-002: Si la BD falla al corregir, se registra y se sigue."""
        campana = self.vencida()
        with mock.patch.object(Campana.objects, "filter", side_effect=DatabaseError("caída")):
            self.assertFalse(corregir_si_vencida(campana, self.ahora))
            self.assertEqual(barrer_vencidas(self.ahora), 0)
        self.assertTrue(campana.habilitada)

    def test_comando_cerrar_campanas_vencidas(self):
        campana = self.vencida()
        out = StringIO()
        call_command("cerrar_campanas_vencidas", stdout=out)
        self.assertIn("Campañas deshabilitadas: 1", out.getvalue())
        campana.refresh_from_db()
        self.assertFalse(campana.habilitada)


# ==========================================
# 2. REGISTRO DE VOTOS
# ==========================================
class EmitirVotoTest(BaseVotacionesTest):

    def test_cupo_de_votos(self):
        """CP-VOT-001: Con un voto disponible, el segundo se rechaza."""
        campana, (alice, bob) = self.crear_campana()

        resultado = votos.emitir_voto(campana.pk, alice, self.votante.pk)
        self.assertEqual(resultado.votos, {alice: 1, bob: 0})
        self.assertEqual((resultado.usados, resultado.disponibles), (1, 0))

        with self.assertRaisesMessage(SolicitudInvalida, "No tienes votos disponibles"):
            votos.emitir_voto(campana.pk, bob, self.votante.pk)
        self.assertEqual(votos.conteo_por_candidato(campana.pk, [alice, bob]), {alice: 1, bob: 0})

    def test_cupo_multiple(self):
        campana, ids = self.crear_campana(candidatos=("A", "B", "C"), votos_por_votante=2)
        votos.emitir_voto(campana.pk, ids[0], self.votante.pk)
        votos.emitir_voto(campana.pk, ids[1], self.votante.pk)
        with self.assertRaises(SolicitudInvalida):
            votos.emitir_voto(campana.pk, ids[2], self.votante.pk)
        self.assertEqual(Voto.objects.filter(campana=campana, votante=self.votante).count(), 2)

    def test_voto_duplicado(self):
        """CP-VOT-002: Votar dos veces por el mismo candidato => Conflicto."""
        campana, (alice, _) = self.crear_campana(votos_por_votante=2)
        votos.emitir_voto(campana.pk, alice, self.votante.pk)
        with self.assertRaisesMessage(Conflicto, "Ya registraste un voto para este candidato en esta campaña"):
            votos.emitir_voto(campana.pk, alice, self.votante.pk)
        self.assertEqual(Voto.objects.filter(campana=campana, candidato_id=alice).count(), 1)

    def test_carrera_resuelta_por_restriccion_unica(self):
        """CP-VOT-003: Si dos solicitudes pasan el chequeo de cupo, la restricción decide."""
        campana, (alice, _) = self.crear_campana(votos_por_votante=2)
        # Otra solicitud ya insertó el mismo voto después del conteo
        Voto.objects.create(campana=campana, candidato_id=alice, votante=self.votante)
        with mock.patch("votaciones.votos.contar_usados", return_value=0):
            with self.assertRaises(Conflicto):
                votos.emitir_voto(campana.pk, alice, self.votante.pk)
        self.assertEqual(Voto.objects.filter(campana=campana, votante=self.votante).count(), 1)

    def test_limite_de_cierre(self):
        """CP-VOT-004: Se acepta en el instante del cierre, no un milisegundo después."""
        campana, (alice, bob) = self.crear_campana(votos_por_votante=2)
        votos.emitir_voto(campana.pk, alice, self.votante.pk, ahora=campana.termina_en)
        with self.assertRaisesMessage(SolicitudInvalida, "Campaña no habilitada o fuera de tiempo"):
            votos.emitir_voto(
                campana.pk, bob, self.votante.pk,
                ahora=campana.termina_en + timedelta(milliseconds=1),
            )

    def test_campana_pendiente_o_deshabilitada(self):
        campana, (alice, _) = self.crear_campana(habilitada=False)
        with self.assertRaises(SolicitudInvalida):
            votos.emitir_voto(campana.pk, alice, self.votante.pk)

        futura, (c, _) = self.crear_campana(
            inicia_en=self.ahora + timedelta(days=1), termina_en=self.ahora + timedelta(days=2)
        )
        with self.assertRaises(SolicitudInvalida):
            votos.emitir_voto(futura.pk, c, self.votante.pk)
        self.assertEqual(Voto.objects.count(), 0)

    def test_candidato_no_vinculado(self):
        campana, _ = self.crear_campana()
        ajeno = Candidato.objects.create(nombre="Ajeno")
        with self.assertRaisesMessage(SolicitudInvalida, "Candidato inválido"):
            votos.emitir_voto(campana.pk, ajeno.pk, self.votante.pk)

    def test_campana_o_votante_inexistente(self):
        campana, (alice, _) = self.crear_campana()
        with self.assertRaises(NoEncontrado):
            votos.emitir_voto(99999, alice, self.votante.pk)
        with self.assertRaises(NoEncontrado):
            votos.emitir_voto(campana.pk, alice, 99999)

    def test_votante_inactivo(self):
        campana, (alice, _) = self.crear_campana()
        Ingeniero.objects.filter(pk=self.votante.pk).update(activo=False)
        with self.assertRaises(Prohibido):
            votos.emitir_voto(campana.pk, alice, self.votante.pk)


class VotarApiTest(BaseVotacionesTest):
    def test_flujo_de_voto(self):
        """CP-VOT-005: Votar por API retorna conteos y cupo; el detalle lo refleja."""
        campana, (alice, bob) = self.crear_campana()
        self.autenticar(self.votante, "voter")
        url = reverse("votaciones:votar", args=[campana.pk])

        response = self.client.post(url, {"candidato_id": alice}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["votos"], {str(alice): 1, str(bob): 0})
        self.assertEqual(response.data["disponibles"], 0)

        response = self.client.post(url, {"candidato_id": bob}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "No tienes votos disponibles")

        detalle = self.client.get(reverse("votaciones:campana", args=[campana.pk])).data
        self.assertEqual(detalle["votos_disponibles"], 0)
        self.assertFalse(detalle["puede_votar"])

    def test_voto_duplicado_api(self):
        campana, (alice, _) = self.crear_campana(votos_por_votante=2)
        self.autenticar(self.votante, "voter")
        url = reverse("votaciones:votar", args=[campana.pk])
        self.client.post(url, {"candidato_id": alice}, format="json")
        response = self.client.post(url, {"candidato_id": alice}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["tipo"], "Conflict")

    def test_voto_sin_candidato_o_sin_token(self):
        campana, _ = self.crear_campana()
        url = reverse("votaciones:votar", args=[campana.pk])
        self.assertEqual(self.client.post(url, {}, format="json").status_code, status.HTTP_401_UNAUTHORIZED)

        self.autenticar(self.votante, "voter")
        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Candidato requerido")


# ==========================================
# 3. ADMINISTRACIÓN DE CAMPAÑAS
# ==========================================
class CampanasApiTest(BaseVotacionesTest):
    def setUp(self):
        super().setUp()
        self.autenticar(self.admin, "admin")

    def payload(self, **extra):
        datos = {
            "titulo": "Tribunal de Honor",
            "descripcion": "Elección anual",
            "votos_por_votante": 2,
            "inicia_en": (self.ahora - timedelta(hours=1)).isoformat(),
            "termina_en": (self.ahora + timedelta(days=1)).isoformat(),
            "candidatos": ["Alice", {"nombre": "Bob", "bio": "Ingeniero civil", "foto_url": "https://fotos/bob.jpg"}],
        }
        datos.update(extra)
        return datos

    def test_crear_y_leer(self):
        """CP-CAM-001: Crear con N candidatos y leer: N candidatos con conteo cero."""
        response = self.client.post(reverse("votaciones:campanas"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        detalle = self.client.get(reverse("votaciones:campana", args=[response.data["id"]])).data
        self.assertEqual(detalle["titulo"], "Tribunal de Honor")
        self.assertEqual(detalle["estado"], "activa")
        self.assertEqual([c["nombre"] for c in detalle["candidatos"]], ["Alice", "Bob"])
        self.assertEqual(detalle["candidatos"][1]["bio"], "Ingeniero civil")
        self.assertEqual(set(detalle["votos"].values()), {0})
        self.assertEqual(len(detalle["votos"]), 2)
        self.assertEqual(detalle["votos_disponibles"], 2)

    def test_votante_no_administra(self):
        """CP-CAM-002: Un votante ve campañas pero no las crea ni borra."""
        campana, _ = self.crear_campana()
        self.autenticar(self.votante, "voter")
        self.assertEqual(self.client.get(reverse("votaciones:campanas")).status_code, status.HTTP_200_OK)
        response = self.client.post(reverse("votaciones:campanas"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(reverse("votaciones:campana", args=[campana.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_validaciones_de_alta(self):
        url = reverse("votaciones:campanas")
        self.assertEqual(
            self.client.post(url, self.payload(votos_por_votante=0), format="json").status_code,
            status.HTTP_400_BAD_REQUEST,
        )
        response = self.client.post(
            url, self.payload(termina_en=(self.ahora - timedelta(days=1)).isoformat()), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Rango de fechas inválido")
        self.assertEqual(Campana.objects.count(), 0)

    def test_candidato_ingeniero(self):
        """CP-CAM-003: Un ingeniero del padrón se reutiliza como candidato entre campañas."""
        candidato = Ingeniero.objects.create(colegiado="5005", nombre="MARIA LOPEZ")
        url = reverse("votaciones:campanas")
        a = self.client.post(url, self.payload(candidatos=[{"ingeniero_id": candidato.pk}]), format="json").data
        b = self.client.post(url, self.payload(candidatos=[{"ingeniero_id": candidato.pk, "bio": "Otra"}]), format="json").data

        self.assertEqual(a["candidatos"][0]["id"], b["candidatos"][0]["id"])
        self.assertEqual(a["candidatos"][0]["nombre"], "MARIA LOPEZ")
        self.assertEqual(b["candidatos"][0]["bio"], "Otra")
        self.assertEqual(Candidato.objects.filter(ingeniero=candidato).count(), 1)

    def test_candidato_ingeniero_inactivo_no_crea_nada(self):
        inactivo = Ingeniero.objects.create(colegiado="6006", nombre="X", activo=False)
        response = self.client.post(
            reverse("votaciones:campanas"),
            self.payload(candidatos=["Alice", {"ingeniero_id": inactivo.pk}]),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Campana.objects.count(), 0)
        self.assertEqual(Candidato.objects.count(), 0)

    def test_editar_reemplaza_candidatos(self):
        """CP-CAM-004: PATCH con candidatos reemplaza la lista completa."""
        campana, (alice, _) = self.crear_campana()
        url = reverse("votaciones:campana", args=[campana.pk])
        response = self.client.patch(
            url, {"titulo": "Nuevo título", "candidatos": [{"id": alice, "bio": "Reelección"}, "Carla"]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["titulo"], "Nuevo título")
        self.assertEqual([c["nombre"] for c in response.data["candidatos"]], ["Alice", "Carla"])
        self.assertEqual(response.data["candidatos"][0]["bio"], "Reelección")

        # Sin 'candidatos' la lista no cambia
        response = self.client.patch(url, {"habilitada": False}, format="json")
        self.assertEqual(len(response.data["candidatos"]), 2)
        self.assertEqual(response.data["estado"], "deshabilitada")

    def test_editar_rango_invalido(self):
        campana, _ = self.crear_campana()
        response = self.client.patch(
            reverse("votaciones:campana", args=[campana.pk]),
            {"termina_en": (campana.inicia_en - timedelta(hours=1)).isoformat()},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Rango de fechas inválido")

    def test_eliminar(self):
        """CP-CAM-005: Eliminar borra votos y vínculos; luego 404."""
        campana, (alice, _) = self.crear_campana()
        votos.emitir_voto(campana.pk, alice, self.votante.pk)
        url = reverse("votaciones:campana", args=[campana.pk])

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Voto.objects.filter(campana_id=campana.pk).exists())
        self.assertFalse(CampanaCandidato.objects.filter(campana_id=campana.pk).exists())
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_opciones_ingenieros(self):
        Ingeniero.objects.create(colegiado="7007", nombre="INACTIVO", activo=False)
        response = self.client.get(reverse("votaciones:opciones_ingenieros"), {"q": "JANE"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i["colegiado"] for i in response.data], ["1001"])

        todos = self.client.get(reverse("votaciones:opciones_ingenieros")).data
        self.assertNotIn("7007", [i["colegiado"] for i in todos])


# ==========================================
# 4. CONCURRENCIA (hilos reales)
# ==========================================
class VotosConcurrentesTest(TransactionTestCase):
    """
    Varios hilos votan a la vez por el mismo votante. Cada hilo usa su propia
    conexión, así que la serialización la hace la base de datos.
    """

    def setUp(self):
        if connection.vendor == "sqlite" and connection.is_in_memory_db():
            self.skipTest("Se necesita una BD compartida entre hilos (archivo o servidor)")
        ahora = timezone.now()
        self.votante = Ingeniero.objects.create(colegiado="1001", nombre="JANE DOE")
        self.datos = {
            "titulo": "Concurrencia",
            "inicia_en": ahora - timedelta(hours=1),
            "termina_en": ahora + timedelta(hours=1),
        }

    def en_paralelo(self, candidatos, campana_id):
        """Emite un voto por candidato, todos liberados al mismo tiempo."""
        barrera = threading.Barrier(len(candidatos))
        resultados = [None] * len(candidatos)

        def votar(i, candidato_id):
            try:
                barrera.wait(timeout=10)
                votos.emitir_voto(campana_id, candidato_id, self.votante.pk)
                resultados[i] = "ok"
            except Exception as e:
                resultados[i] = type(e).__name__
            finally:
                connection.close()

        hilos = [threading.Thread(target=votar, args=(i, c)) for i, c in enumerate(candidatos)]
        for h in hilos:
            h.start()
        for h in hilos:
            h.join(timeout=60)
        return sorted(resultados)

    def test_cupo_no_se_excede(self):
        """CP-CON-001: Con cupo 1 y cuatro candidatos distintos, exactamente un voto queda."""
        vista = repositorio.crear_campana({**self.datos, "votos_por_votante": 1}, ["A", "B", "C", "D"])
        ids = [c["id"] for c in vista["candidatos"]]

        resultados = self.en_paralelo(ids, vista["id"])

        self.assertEqual(resultados, ["SolicitudInvalida"] * 3 + ["ok"])
        self.assertEqual(Voto.objects.filter(campana_id=vista["id"], votante=self.votante).count(), 1)

    def test_cupo_multiple_concurrente(self):
        vista = repositorio.crear_campana({**self.datos, "votos_por_votante": 2}, ["A", "B", "C", "D"])
        ids = [c["id"] for c in vista["candidatos"]]

        resultados = self.en_paralelo(ids, vista["id"])

        self.assertEqual(resultados, ["SolicitudInvalida"] * 2 + ["ok"] * 2)
        self.assertEqual(Voto.objects.filter(campana_id=vista["id"], votante=self.votante).count(), 2)

    def test_mismo_candidato_concurrente(self):
        """CP-CON-002: Dos votos simultáneos al mismo candidato: uno entra y el otro es Conflicto."""
        vista = repositorio.crear_campana({**self.datos, "votos_por_votante": 2}, ["A", "B"])
        alice = vista["candidatos"][0]["id"]

        resultados = self.en_paralelo([alice, alice], vista["id"])

        self.assertEqual(resultados, ["Conflicto", "ok"])
        self.assertEqual(Voto.objects.filter(campana_id=vista["id"], candidato_id=alice).count(), 1)
