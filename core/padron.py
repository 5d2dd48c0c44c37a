"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Operaciones del padrón de ingenieros: búsquedas,
                       sincronización masiva (upsert con semántica COALESCE),
                       activación, promoción a administrador, edición y
                       restablecimiento de contraseña. Todas las mutaciones
                       son síncronas y visibles de inmediato (sin caché).
--------------------------------------------------------------------------------
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils.crypto import get_random_string

from core.excepciones import Conflicto, NoEncontrado, SolicitudInvalida
from core.models import Ingeniero
from core.validators import normalizar_fecha, password_es_fuerte, solo_digitos

logger = logging.getLogger(__name__)

# Alfabeto para contraseñas generadas (sin caracteres ambiguos como I, l, O, 0 repetidos)
ALFABETO_PASSWORD = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz0123456789!@#$%^&*()"
LARGO_PASSWORD_GENERADA = 12

# Límites de los listados administrativos
LIMITE_LISTADO = 200
LIMITE_BUSQUEDA = 20


def mensaje_duplicado(exc: IntegrityError, por_defecto: str = "Registro duplicado") -> str:
    """Traduce el error de unicidad del motor a un mensaje legible."""
    texto = str(exc).lower()
    if "email" in texto:
        return "El correo ya está registrado"
    if "dpi" in texto:
        return "El DPI ya está registrado"
    return por_defecto


# ---------------------------------------------------------------------------
# Búsquedas
# ---------------------------------------------------------------------------
def buscar_por_colegiado(colegiado) -> Ingeniero | None:
    colegiado = str(colegiado or "").strip()
    if not colegiado:
        return None
    return Ingeniero.objects.filter(colegiado=colegiado).first()


def buscar_por_email_o_colegiado(identificador) -> Ingeniero | None:
    """
    Busca por colegiado exacto o por email sin distinguir mayúsculas.
    Si ambos coinciden con filas distintas gana el colegiado.
    """
    identificador = str(identificador or "").strip()
    if not identificador:
        return None
    por_colegiado = Ingeniero.objects.filter(colegiado=identificador).first()
    if por_colegiado is not None:
        return por_colegiado
    return Ingeniero.objects.filter(email__iexact=identificador).first()


def obtener_ingeniero(pk) -> Ingeniero:
    try:
        return Ingeniero.objects.get(pk=pk)
    except (Ingeniero.DoesNotExist, ValueError, TypeError):
        raise NoEncontrado("Ingeniero no encontrado")


# ---------------------------------------------------------------------------
# Sincronización masiva
# ---------------------------------------------------------------------------
def _limpiar_registro(indice: int, registro) -> dict | None:
    """
    Normaliza un registro de importación.
    Retorna None si no trae colegiado (se omite, igual que en la carga inicial).
    Los campos ausentes quedan en None para no pisar valores existentes.
    """
    if not isinstance(registro, dict):
        raise SolicitudInvalida(f"Registro {indice}: formato inválido")

    colegiado = str(registro.get("colegiado") or "").strip()
    if not colegiado:
        return None

    nombre = " ".join(str(registro.get("nombre") or "").split()) or None

    activo = registro.get("activo")
    if activo is not None:
        activo = bool(activo)

    dpi = solo_digitos(registro.get("dpi")) or None

    fecha_cruda = registro.get("fecha_nacimiento", registro.get("fechaNacimiento"))
    fecha = None
    if fecha_cruda:
        fecha = normalizar_fecha(fecha_cruda)
        if fecha is None:
            raise SolicitudInvalida(f"Registro {indice}: fecha de nacimiento inválida")

    email = str(registro.get("email") or "").strip().lower() or None

    return {
        "colegiado": colegiado,
        "nombre": nombre,
        "activo": activo,
        "dpi": dpi,
        "fecha_nacimiento": fecha,
        "email": email,
    }


def sincronizar_padron(registros) -> int:
    """
    Upsert idempotente del padrón por colegiado.
    Un valor entrante None nunca reemplaza un valor guardado (COALESCE).
    Todo ocurre en una transacción: o se aplica el lote completo o nada.
    Retorna la cantidad de registros aplicados.
    """
    if not isinstance(registros, (list, tuple)):
        raise SolicitudInvalida("Formato inválido: se esperaba una lista de registros")

    # Validación completa antes de tocar la base de datos
    limpios = []
    for i, registro in enumerate(registros):
        limpio = _limpiar_registro(i, registro)
        if limpio is not None:
            limpios.append(limpio)

    creados = actualizados = 0
    try:
        with transaction.atomic():
            for datos in limpios:
                ing = (
                    Ingeniero.objects.select_for_update()
                    .filter(colegiado=datos["colegiado"])
                    .first()
                )
                if ing is None:
                    if not datos["nombre"]:
                        raise SolicitudInvalida(
                            f"Colegiado {datos['colegiado']}: el nombre es obligatorio para altas nuevas"
                        )
                    Ingeniero.objects.create(
                        colegiado=datos["colegiado"],
                        nombre=datos["nombre"],
                        activo=True if datos["activo"] is None else datos["activo"],
                        dpi=datos["dpi"],
                        fecha_nacimiento=datos["fecha_nacimiento"],
                        email=datos["email"],
                    )
                    creados += 1
                    continue

                # Solo se guardan los campos que realmente cambian
                cambios = []
                for campo in ("nombre", "activo", "dpi", "fecha_nacimiento", "email"):
                    valor = datos[campo]
                    if valor is not None and getattr(ing, campo) != valor:
                        setattr(ing, campo, valor)
                        cambios.append(campo)
                if cambios:
                    ing.save(update_fields=cambios + ["actualizado"])
                    actualizados += 1
    except IntegrityError as exc:
        raise Conflicto(mensaje_duplicado(exc))

    logger.info(
        "Padrón sincronizado: %s registros (%s nuevos, %s actualizados)",
        len(limpios), creados, actualizados,
    )
    return len(limpios)


# ---------------------------------------------------------------------------
# Estado y rol
# ---------------------------------------------------------------------------
def cambiar_estado(colegiado, activo: bool) -> Ingeniero:
    ing = buscar_por_colegiado(colegiado)
    if ing is None:
        raise NoEncontrado("Colegiado no encontrado en el padrón")
    if ing.activo != bool(activo):
        ing.activo = bool(activo)
        ing.save(update_fields=["activo", "actualizado"])
        logger.info("Colegiado %s marcado activo=%s", ing.colegiado, ing.activo)
    return ing


def promover_admin(colegiado) -> Ingeniero:
    ing = buscar_por_colegiado(colegiado)
    if ing is None:
        raise NoEncontrado("Colegiado no encontrado en el padrón")
    if not ing.is_admin:
        ing.is_admin = True
        ing.save(update_fields=["is_admin", "actualizado"])
        logger.info("Colegiado %s promovido a administrador", ing.colegiado)
    return ing


# ---------------------------------------------------------------------------
# Edición administrativa
# ---------------------------------------------------------------------------
def actualizar_ingeniero(pk, nombre=None, email=None, activo=None, password=None) -> Ingeniero:
    """
    Edita campos puntuales de un ingeniero. Los argumentos en None no se tocan.
    Email repetido => Conflicto('Email duplicado').
    """
    ing = obtener_ingeniero(pk)

    cambios = []
    if nombre is not None:
        ing.nombre = " ".join(nombre.split())
        cambios.append("nombre")
    if email is not None:
        ing.email = email.strip().lower() or None
        cambios.append("email")
    if activo is not None:
        ing.activo = bool(activo)
        cambios.append("activo")
    if password is not None:
        if not password_es_fuerte(password):
            raise SolicitudInvalida("Password débil")
        ing.set_password(password)
        cambios.append("password_hash")

    if not cambios:
        return ing

    try:
        with transaction.atomic():
            ing.save(update_fields=cambios + ["actualizado"])
    except IntegrityError:
        raise Conflicto("Email duplicado")

    logger.info("Ingeniero %s actualizado: %s", ing.colegiado, ", ".join(cambios))
    return ing


def generar_password() -> str:
    """Genera una contraseña aleatoria que cumple la política de fortaleza."""
    while True:
        candidata = get_random_string(LARGO_PASSWORD_GENERADA, ALFABETO_PASSWORD)
        if password_es_fuerte(candidata):
            return candidata


def restablecer_password(pk) -> str:
    """Asigna una contraseña nueva generada y la retorna una única vez."""
    ing = obtener_ingeniero(pk)
    password = generar_password()
    ing.set_password(password)
    ing.save(update_fields=["password_hash", "actualizado"])
    logger.info("Contraseña restablecida para colegiado %s", ing.colegiado)
    return password


# ---------------------------------------------------------------------------
# Consultas de apoyo
# ---------------------------------------------------------------------------
def estado_colegiado(colegiado) -> dict:
    """Estado público de un colegiado (para la pantalla de registro)."""
    colegiado = str(colegiado or "").strip()
    if not colegiado.isdigit():
        raise SolicitudInvalida("Colegiado inválido")
    ing = buscar_por_colegiado(colegiado)
    if ing is None:
        return {"existe_en_padron": False, "activo": False, "tiene_cuenta": False}
    return {
        "existe_en_padron": True,
        "activo": ing.activo,
        "tiene_cuenta": ing.tiene_cuenta,
    }


def diagnostico_padron() -> dict:
    muestra = Ingeniero.objects.order_by("id").values("colegiado", "nombre", "activo", "is_admin")[:5]
    return {
        "total": Ingeniero.objects.count(),
        "activos": Ingeniero.objects.filter(activo=True).count(),
        "admins": Ingeniero.objects.filter(is_admin=True).count(),
        "muestra": list(muestra),
    }


def opciones_candidatos(q: str = "") -> list[dict]:
    """
    Ingenieros activos para elegir como candidatos.
    Sin texto retorna todos; con texto busca por nombre o colegiado (máx. 20).
    """
    qs = Ingeniero.objects.filter(activo=True).order_by("nombre").only("id", "colegiado", "nombre")
    q = (q or "").strip()[:100]
    if q:
        qs = qs.filter(Q(nombre__icontains=q) | Q(colegiado__icontains=q))[:LIMITE_BUSQUEDA]
    return [
        {"id": i.id, "colegiado": i.colegiado, "nombre": i.nombre}
        for i in qs
    ]
