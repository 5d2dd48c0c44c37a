"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Ciclo de vida de una campaña. El estado se calcula a partir de
               la habilitación, los límites de tiempo y la hora actual. Las
               campañas vencidas que siguen habilitadas se corrigen al leerlas
               (no hay tarea programada).
--------------------------------------------------------------------------------
"""
import logging

from django.db import DatabaseError, models
from django.utils import timezone

from core.roles import ROLE_MATRIX

from .models import Campana

logger = logging.getLogger(__name__)


class EstadoCampana(models.TextChoices):
    PENDIENTE = "pendiente", "Pendiente"
    ACTIVA = "activa", "Activa"
    FINALIZADA = "finalizada", "Finalizada"
    DESHABILITADA = "deshabilitada", "Deshabilitada"


def evaluar_estado(habilitada, inicia_en, termina_en, ahora) -> EstadoCampana:
    """
    Función pura. Ambos límites son inclusivos para votar:
    inicia_en <= ahora <= termina_en.
    """
    if ahora < inicia_en:
        return EstadoCampana.PENDIENTE
    if ahora > termina_en:
        return EstadoCampana.FINALIZADA
    if habilitada:
        return EstadoCampana.ACTIVA
    return EstadoCampana.DESHABILITADA


def estado_de(campana, ahora=None) -> EstadoCampana:
    return evaluar_estado(
        campana.habilitada, campana.inicia_en, campana.termina_en, ahora or timezone.now()
    )


def puede_votar(estado, restantes: int, rol) -> bool:
    """Activa, con cupo y con un rol que tenga la acción 'vote'."""
    return (
        estado == EstadoCampana.ACTIVA
        and restantes > 0
        and rol in ROLE_MATRIX["campanas"]["vote"]
    )


def corregir_si_vencida(campana, ahora=None) -> bool:
    """
    Si la campaña ya terminó y sigue habilitada, la deshabilita en la BD.
    Es una corrección de mejor esfuerzo: si falla se registra y la lectura sigue.
    Retorna True si se corrigió.
    """
    ahora = ahora or timezone.now()
    if not campana.habilitada or estado_de(campana, ahora) != EstadoCampana.FINALIZADA:
        return False
    try:
        Campana.objects.filter(pk=campana.pk, habilitada=True).update(habilitada=False)
    except DatabaseError:
        logger.warning("No se pudo deshabilitar la campaña vencida %s", campana.pk, exc_info=True)
        return False
    campana.habilitada = False
    logger.info("Campaña %s deshabilitada automáticamente (cierre %s)", campana.pk, campana.termina_en)
    return True


def barrer_vencidas(ahora=None) -> int:
    """
    Deshabilita en bloque todas las campañas vencidas.
    Retorna la cantidad corregida (0 si la BD falla).
    """
    ahora = ahora or timezone.now()
    try:
        n = Campana.objects.filter(habilitada=True, termina_en__lt=ahora).update(habilitada=False)
    except DatabaseError:
        logger.warning("Falló el barrido de campañas vencidas", exc_info=True)
        return 0
    if n:
        logger.info("%s campaña(s) vencida(s) deshabilitada(s)", n)
    return n
