"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Registro de votos. Emite un voto validando ventana de la campaña,
               vínculo del candidato, cupo del votante y unicidad por
               (campaña, votante, candidato). Los conteos se calculan siempre
               agregando la tabla de votos.
--------------------------------------------------------------------------------
"""
import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone

from core.excepciones import Conflicto, NoEncontrado, Prohibido, SolicitudInvalida
from core.models import Ingeniero

from .ciclo import EstadoCampana, corregir_si_vencida, estado_de
from .models import Campana, CampanaCandidato, Voto

logger = logging.getLogger(__name__)


@dataclass
class ResultadoVoto:
    votos: dict
    usados: int
    disponibles: int

    def como_dict(self) -> dict:
        return {
            "ok": True,
            "votos": {str(k): v for k, v in self.votos.items()},
            "usados": self.usados,
            "disponibles": self.disponibles,
        }


def contar_usados(campana_id, votante_id) -> int:
    """Votos ya emitidos por el votante en la campaña (todos los candidatos)."""
    return Voto.objects.filter(campana_id=campana_id, votante_id=votante_id).count()


def conteo_por_candidato(campana_id, candidato_ids=None) -> dict:
    """
    {candidato_id: votos}. Los candidatos indicados en candidato_ids
    aparecen aunque no tengan votos (0).
    """
    conteo = {cid: 0 for cid in (candidato_ids or [])}
    agregados = (
        Voto.objects.filter(campana_id=campana_id)
        .values("candidato_id")
        .annotate(c=Count("id"))
        .order_by()
    )
    for row in agregados:
        conteo[row["candidato_id"]] = row["c"]
    return conteo


def emitir_voto(campana_id, candidato_id, votante_id, ahora=None) -> ResultadoVoto:
    """
    Registra un voto.
    - Campaña inexistente => NoEncontrado
    - Fuera de ventana o deshabilitada => SolicitudInvalida
    - Candidato no vinculado => SolicitudInvalida
    - Votante inexistente => NoEncontrado; inactivo => Prohibido
    - Cupo agotado => SolicitudInvalida
    - Mismo candidato otra vez => Conflicto (lo decide la restricción única)
    """
    ahora = ahora or timezone.now()

    campana = Campana.objects.filter(pk=campana_id).first()
    if campana is None:
        raise NoEncontrado("Campaña no encontrada")

    if estado_de(campana, ahora) != EstadoCampana.ACTIVA:
        corregir_si_vencida(campana, ahora)
        raise SolicitudInvalida("Campaña no habilitada o fuera de tiempo")

    if not CampanaCandidato.objects.filter(campana_id=campana.pk, candidato_id=candidato_id).exists():
        raise SolicitudInvalida("Candidato inválido")

    with transaction.atomic():
        # Bloquea la fila del votante: sus votos simultáneos se serializan y
        # el cupo no puede excederse entre el conteo y el insert
        votante = Ingeniero.objects.select_for_update().filter(pk=votante_id).first()
        if votante is None:
            raise NoEncontrado("Votante no encontrado")
        if not votante.activo:
            raise Prohibido("Colegiado inactivo")

        usados = contar_usados(campana.pk, votante.pk)
        if usados >= campana.votos_por_votante:
            logger.info("Voto rechazado por cupo: campaña=%s votante=%s", campana.pk, votante.colegiado)
            raise SolicitudInvalida("No tienes votos disponibles")

        try:
            with transaction.atomic():
                Voto.objects.create(campana=campana, candidato_id=candidato_id, votante=votante)
        except IntegrityError:
            logger.info(
                "Voto duplicado: campaña=%s candidato=%s votante=%s",
                campana.pk, candidato_id, votante.colegiado,
            )
            raise Conflicto("Ya registraste un voto para este candidato en esta campaña")

        usados += 1

    logger.info("Voto registrado: campaña=%s candidato=%s votante=%s", campana.pk, candidato_id, votante.colegiado)

    vinculados = CampanaCandidato.objects.filter(campana_id=campana.pk).values_list("candidato_id", flat=True)
    return ResultadoVoto(
        votos=conteo_por_candidato(campana.pk, list(vinculados)),
        usados=usados,
        disponibles=max(campana.votos_por_votante - usados, 0),
    )
