"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Lógica de credenciales: auto-registro contra el padrón, inicio de
               sesión de votantes (colegiado + DPI + fecha de nacimiento +
               contraseña) e inicio de sesión de administradores. Emite los
               tokens de sesión firmados.
--------------------------------------------------------------------------------
"""
import logging
import time

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction
from django.utils import timezone

from core import padron
from core.excepciones import Conflicto, NoAutorizado, Prohibido, SolicitudInvalida
from core.models import Ingeniero
from core.roles import ADMIN, VOTANTE
from core.sesiones import emitir_token
from core.validators import (
    normalizar_fecha,
    normalizar_nombre,
    password_es_fuerte,
    solo_digitos,
)

logger = logging.getLogger(__name__)

# Mensaje único para cualquier falla de login (no revela qué dato falló)
CREDENCIALES_INVALIDAS = "Credenciales inválidas"


def registrar(colegiado, nombre, email, dpi, fecha_nacimiento, password, hoy=None) -> Ingeniero:
    """
    Auto-registro de un ingeniero del padrón.
    Valida contra los datos del padrón y guarda el hash de la contraseña.
    Un colegiado solo puede tener una cuenta: si ya tiene hash, se rechaza.
    """
    inicio = time.monotonic()

    fecha = normalizar_fecha(fecha_nacimiento, hoy=hoy)
    if fecha is None:
        raise SolicitudInvalida("Fecha de nacimiento inválida")

    ing = padron.buscar_por_colegiado(colegiado)
    if ing is None:
        raise Prohibido("Colegiado no autorizado para registrarse")
    if not ing.activo:
        raise Prohibido("Colegiado inactivo. Contacta al administrador.")
    if normalizar_nombre(ing.nombre) != normalizar_nombre(nombre):
        raise Prohibido("El nombre no coincide con el padrón")
    if ing.password_hash:
        raise Conflicto("El colegiado ya tiene una cuenta")

    # El padrón debe traer DPI y fecha para poder validar la identidad
    if not ing.dpi or not ing.fecha_nacimiento:
        raise SolicitudInvalida(
            "Datos del padrón incompletos (DPI o fecha de nacimiento faltan). "
            "Contacta al administrador."
        )
    if solo_digitos(ing.dpi) != solo_digitos(dpi):
        raise SolicitudInvalida("DPI no coincide con el padrón")
    if ing.fecha_nacimiento != fecha:
        raise SolicitudInvalida("Fecha de nacimiento no coincide con el padrón")

    if not password_es_fuerte(password):
        raise SolicitudInvalida(
            "La contraseña debe incluir mayúscula, minúscula, número y símbolo"
        )

    email = (email or "").strip().lower()
    if Ingeniero.objects.filter(email__iexact=email).exclude(pk=ing.pk).exists():
        raise Conflicto("El correo ya está registrado")

    try:
        with transaction.atomic():
            # Condición en el UPDATE: dos registros simultáneos no pueden ganar ambos
            filas = Ingeniero.objects.filter(pk=ing.pk, password_hash__isnull=True).update(
                email=email,
                password_hash=make_password(password),
                activo=True,
                actualizado=timezone.now(),
            )
    except IntegrityError as exc:
        raise Conflicto(padron.mensaje_duplicado(exc))

    if filas == 0:
        raise Conflicto("El colegiado ya tiene una cuenta")

    logger.info(
        "Registro exitoso colegiado=%s id=%s (%d ms)",
        ing.colegiado, ing.pk, int((time.monotonic() - inicio) * 1000),
    )
    ing.refresh_from_db()
    return ing


def iniciar_sesion(colegiado, dpi, fecha_nacimiento, password, hoy=None) -> str:
    """
    Login de votante. Cualquier dato incorrecto (colegiado, DPI, fecha,
    contraseña, cuenta sin registrar o inactiva) responde lo mismo.
    Retorna el token de sesión con rol 'voter'.
    """
    if not colegiado or not dpi or not fecha_nacimiento or not password:
        raise SolicitudInvalida("Campos requeridos faltantes")

    fecha = normalizar_fecha(fecha_nacimiento, hoy=hoy)
    if fecha is None:
        raise SolicitudInvalida("Fecha de nacimiento inválida")

    ing = padron.buscar_por_colegiado(colegiado)
    if ing is None:
        # Igualar el costo del hash para no revelar si el colegiado existe
        make_password(password)
        logger.info("Login fallido: colegiado %s no existe", colegiado)
        raise NoAutorizado(CREDENCIALES_INVALIDAS)

    motivo = None
    if not ing.activo:
        motivo = "inactivo"
    elif not ing.dpi or not solo_digitos(dpi):
        # Sin DPI en el padrón (o DPI sin dígitos) no hay con qué comparar
        motivo = "dpi"
    elif solo_digitos(ing.dpi) != solo_digitos(dpi):
        motivo = "dpi"
    elif ing.fecha_nacimiento != fecha:
        motivo = "fecha"
    elif not ing.check_password(password):
        motivo = "password"

    if motivo:
        logger.info("Login fallido colegiado=%s motivo=%s", ing.colegiado, motivo)
        raise NoAutorizado(CREDENCIALES_INVALIDAS)

    return emitir_token(ing, VOTANTE)


def iniciar_sesion_admin(password, colegiado=None, email=None) -> str:
    """
    Login de administrador por colegiado o email.
    Exige marca is_admin, cuenta activa y contraseña registrada.
    """
    identificador = colegiado or email
    if not identificador or not password:
        raise SolicitudInvalida("Campos requeridos faltantes")

    ing = padron.buscar_por_email_o_colegiado(identificador)
    if ing is None:
        make_password(password)
        logger.info("Login admin fallido: %s no existe", identificador)
        raise NoAutorizado(CREDENCIALES_INVALIDAS)

    if not ing.is_admin or not ing.activo or not ing.check_password(password):
        logger.info("Login admin fallido colegiado=%s", ing.colegiado)
        raise NoAutorizado(CREDENCIALES_INVALIDAS)

    return emitir_token(ing, ADMIN)
