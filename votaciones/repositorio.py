"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Repositorio de campañas: alta, edición, lectura enriquecida
               (candidatos, conteos y cupo del votante) y eliminación.
               Toda mutación de varias sentencias corre en una transacción.
--------------------------------------------------------------------------------
"""
import logging
from collections import defaultdict

from django.db import IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone

from core.excepciones import Conflicto, NoEncontrado, SolicitudInvalida
from core.models import Ingeniero

from . import ciclo
from .models import Campana, CampanaCandidato, Candidato, Voto

logger = logging.getLogger(__name__)

# Campos de la campaña que se pueden editar
CAMPOS_EDITABLES = ("titulo", "descripcion", "votos_por_votante", "habilitada", "inicia_en", "termina_en")


# ---------------------------------------------------------------------------
# Candidatos
# ---------------------------------------------------------------------------
def _texto(valor):
    valor = (str(valor).strip() if valor is not None else "")
    return valor or None


def resolver_candidato(entrada):
    """
    Convierte la entrada de un candidato en (Candidato, bio_de_campaña).
    Formas aceptadas:
      "Nombre"                      -> candidato nuevo por nombre
      {"id": 5}                     -> candidato existente
      {"ingeniero_id": 9}           -> candidato del ingeniero (se reutiliza o se crea)
      {"nombre": "...", "foto_url"} -> candidato nuevo
    Todas las formas de objeto aceptan "bio" (propia de la campaña).
    """
    if isinstance(entrada, str):
        nombre = _texto(entrada)
        if not nombre:
            raise SolicitudInvalida("Nombre de candidato requerido")
        return Candidato.objects.create(nombre=nombre), None

    if not isinstance(entrada, dict):
        raise SolicitudInvalida("Candidato inválido")

    bio = _texto(entrada.get("bio"))

    if entrada.get("id"):
        candidato = Candidato.objects.filter(pk=entrada["id"]).first()
        if candidato is None:
            raise NoEncontrado("Candidato no encontrado")
        return candidato, bio

    if entrada.get("ingeniero_id"):
        ing = Ingeniero.objects.filter(pk=entrada["ingeniero_id"], activo=True).first()
        if ing is None:
            raise NoEncontrado("Ingeniero no encontrado o inactivo")
        candidato = Candidato.objects.filter(ingeniero=ing).first()
        if candidato is None:
            candidato = Candidato.objects.create(
                nombre=ing.nombre,
                ingeniero=ing,
                foto_url=_texto(entrada.get("foto_url")),
            )
        return candidato, bio

    nombre = _texto(entrada.get("nombre"))
    if not nombre:
        raise SolicitudInvalida("Nombre de candidato requerido")
    candidato = Candidato.objects.create(nombre=nombre, foto_url=_texto(entrada.get("foto_url")))
    return candidato, bio


def _vincular_candidatos(campana, candidatos):
    """Crea los vínculos; si un candidato se repite, gana la última bio."""
    for orden, entrada in enumerate(candidatos):
        candidato, bio = resolver_candidato(entrada)
        CampanaCandidato.objects.update_or_create(
            campana=campana,
            candidato=candidato,
            defaults={"bio": bio, "orden": orden},
        )


# ---------------------------------------------------------------------------
# Validación
# ---------------------------------------------------------------------------
def _validar(datos):
    if not _texto(datos.get("titulo")):
        raise SolicitudInvalida("El título es obligatorio")
    votos = datos.get("votos_por_votante")
    if votos is None or int(votos) < 1:
        raise SolicitudInvalida("Los votos por votante deben ser al menos 1")
    inicio, fin = datos.get("inicia_en"), datos.get("termina_en")
    if inicio is None or fin is None:
        raise SolicitudInvalida("Campos requeridos faltantes")
    if inicio >= fin:
        raise SolicitudInvalida("Rango de fechas inválido")


# ---------------------------------------------------------------------------
# Vista enriquecida
# ---------------------------------------------------------------------------
def _vista(campana, conteo, usados, votante_id, rol, ahora):
    """Arma el diccionario que se entrega a la API."""
    vinculos = sorted(campana.vinculos.all(), key=lambda v: (v.orden, v.candidato_id))

    votos = {v.candidato_id: 0 for v in vinculos}
    votos.update(conteo)

    estado = ciclo.estado_de(campana, ahora)
    disponibles = max(campana.votos_por_votante - usados, 0)

    return {
        "id": campana.id,
        "titulo": campana.titulo,
        "descripcion": campana.descripcion,
        "habilitada": campana.habilitada,
        "estado": estado.value,
        "inicia_en": campana.inicia_en.isoformat(),
        "termina_en": campana.termina_en.isoformat(),
        "votos_por_votante": campana.votos_por_votante,
        "votos_disponibles": disponibles,
        "puede_votar": bool(votante_id) and ciclo.puede_votar(estado, disponibles, rol),
        "candidatos": [
            {
                "id": v.candidato_id,
                "nombre": v.candidato.nombre,
                "bio": v.bio_efectiva,
                "foto_url": v.candidato.foto_url,
                "ingeniero_id": v.candidato.ingeniero_id,
            }
            for v in vinculos
        ],
        "votos": {str(k): n for k, n in votos.items()},
    }


def _consulta_base():
    return Campana.objects.prefetch_related("vinculos__candidato")


def obtener_campana(pk, votante_id=None, rol=None, ahora=None) -> dict:
    """
    Detalle de una campaña con candidatos, conteos y cupo del votante.
    Si la campaña ya venció y sigue habilitada, se corrige en la BD.
    """
    ahora = ahora or timezone.now()
    campana = _consulta_base().filter(pk=pk).first()
    if campana is None:
        raise NoEncontrado("Campaña no encontrada")

    ciclo.corregir_si_vencida(campana, ahora)

    conteo = dict(
        Voto.objects.filter(campana_id=campana.pk)
        .values_list("candidato_id")
        .annotate(c=Count("id"))
        .order_by()
    )
    usados = 0
    if votante_id:
        usados = Voto.objects.filter(campana_id=campana.pk, votante_id=votante_id).count()
    return _vista(campana, conteo, usados, votante_id, rol, ahora)


def listar_campanas(votante_id=None, rol=None, ahora=None) -> list[dict]:
    """
    Todas las campañas, de la más reciente a la más antigua (por inicio).
    Antes de leer se deshabilitan en bloque las vencidas.
    """
    ahora = ahora or timezone.now()
    ciclo.barrer_vencidas(ahora)

    campanas = list(_consulta_base().order_by("-inicia_en", "-id"))
    ids = [c.pk for c in campanas]

    # Conteos de todas las campañas en una sola consulta
    conteos = defaultdict(dict)
    for row in (
        Voto.objects.filter(campana_id__in=ids)
        .values("campana_id", "candidato_id")
        .annotate(c=Count("id"))
        .order_by()
    ):
        conteos[row["campana_id"]][row["candidato_id"]] = row["c"]

    usados = {}
    if votante_id:
        usados = dict(
            Voto.objects.filter(votante_id=votante_id, campana_id__in=ids)
            .values_list("campana_id")
            .annotate(c=Count("id"))
            .order_by()
        )

    resultado = []
    for campana in campanas:
        # Por si el barrido en bloque no pudo escribir
        ciclo.corregir_si_vencida(campana, ahora)
        resultado.append(
            _vista(campana, conteos[campana.pk], usados.get(campana.pk, 0), votante_id, rol, ahora)
        )
    return resultado


# ---------------------------------------------------------------------------
# Mutaciones
# ---------------------------------------------------------------------------
def crear_campana(datos: dict, candidatos=None) -> dict:
    """Crea la campaña y vincula sus candidatos en una sola transacción."""
    _validar(datos)
    try:
        with transaction.atomic():
            campana = Campana.objects.create(
                titulo=_texto(datos["titulo"]),
                descripcion=_texto(datos.get("descripcion")),
                votos_por_votante=int(datos["votos_por_votante"]),
                habilitada=bool(datos.get("habilitada", True)),
                inicia_en=datos["inicia_en"],
                termina_en=datos["termina_en"],
            )
            _vincular_candidatos(campana, candidatos or [])
    except IntegrityError:
        logger.warning("Conflicto de integridad creando campaña '%s'", datos.get("titulo"), exc_info=True)
        raise Conflicto("No se pudo crear la campaña: datos duplicados")

    logger.info("Campaña %s creada con %s candidato(s)", campana.pk, len(candidatos or []))
    return obtener_campana(campana.pk)


def actualizar_campana(pk, datos: dict, candidatos=None) -> dict:
    """
    Edición parcial. Si llega 'candidatos' (aunque sea lista vacía) reemplaza
    por completo los vínculos anteriores. Los votos ya emitidos se conservan.
    """
    try:
        with transaction.atomic():
            campana = Campana.objects.select_for_update().filter(pk=pk).first()
            if campana is None:
                raise NoEncontrado("Campaña no encontrada")

            for campo in CAMPOS_EDITABLES:
                if campo in datos:
                    valor = datos[campo]
                    if campo in ("titulo", "descripcion"):
                        valor = _texto(valor)
                    setattr(campana, campo, valor)

            _validar({campo: getattr(campana, campo) for campo in CAMPOS_EDITABLES})
            campana.save()

            if candidatos is not None:
                CampanaCandidato.objects.filter(campana=campana).delete()
                _vincular_candidatos(campana, candidatos)
    except IntegrityError:
        logger.warning("Conflicto de integridad actualizando campaña %s", pk, exc_info=True)
        raise Conflicto("No se pudo actualizar la campaña: datos duplicados")

    logger.info("Campaña %s actualizada", pk)
    return obtener_campana(pk)


def eliminar_campana(pk) -> None:
    """Borra votos, vínculos y la campaña; todo o nada."""
    with transaction.atomic():
        campana = Campana.objects.select_for_update().filter(pk=pk).first()
        if campana is None:
            raise NoEncontrado("Campaña no encontrada")
        votos, _ = Voto.objects.filter(campana_id=pk).delete()
        CampanaCandidato.objects.filter(campana_id=pk).delete()
        campana.delete()
    logger.info("Campaña %s eliminada (%s votos)", pk, votos)
