"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Contiene validadores y normalizadores de datos del
                       padrón: fechas de nacimiento en formatos locales,
                       nombres para comparación, DPI guatemalteco y
                       fortaleza de contraseñas.
--------------------------------------------------------------------------------
"""

# Importa módulo de expresiones regulares.
import re
# Importa unicodedata para quitar tildes (descomposición NFD).
import unicodedata
from datetime import date

from django.conf import settings
# Importa la excepción estándar de validación de Django.
from django.core.exceptions import ValidationError

# Formatos de fecha aceptados.
FECHA_ISO = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
FECHA_LATAM_4 = re.compile(r'^(\d{2})/(\d{2})/(\d{4})$')
FECHA_LATAM_2 = re.compile(r'^(\d{2})/(\d{2})/(\d{2})$')

# DPI: Documento Personal de Identificación, exactamente 13 dígitos.
DPI_REGEX = re.compile(r'^\d{13}$')
# Cualquier caracter que no sea letra, dígito, guion bajo ni espacio.
SIMBOLO_REGEX = re.compile(r'[^\w\s]')


def normalizar_fecha(valor, hoy: date | None = None) -> date | None:
    """
    Convierte una fecha de nacimiento a `date`.
    Acepta YYYY-MM-DD, DD/MM/YYYY y DD/MM/YY. Con año de dos dígitos,
    si el año es <= al año actual (dos dígitos) se asume 2000s, si no 1900s.
    Retorna None si el texto no tiene un formato reconocido o la fecha no existe.
    """
    if valor is None or valor == "":
        return None
    if isinstance(valor, date):
        return valor

    texto = str(valor).strip()

    m = FECHA_ISO.match(texto)
    if m:
        anio, mes, dia = (int(x) for x in m.groups())
    else:
        m = FECHA_LATAM_4.match(texto)
        if m:
            dia, mes, anio = (int(x) for x in m.groups())
        else:
            m = FECHA_LATAM_2.match(texto)
            if not m:
                return None
            dia, mes, yy = (int(x) for x in m.groups())
            actual_yy = (hoy or date.today()).year % 100
            anio = (2000 if yy <= actual_yy else 1900) + yy

    try:
        return date(anio, mes, dia)
    except ValueError:
        # Ej. 31/02/1990
        return None


def normalizar_nombre(valor: str) -> str:
    """
    Forma canónica para comparar nombres: sin tildes, espacios colapsados,
    en mayúsculas. 'José  García' == 'JOSE GARCIA'.
    """
    if not valor:
        return ""
    texto = " ".join(str(valor).split())
    texto = unicodedata.normalize("NFD", texto)
    texto = "".join(c for c in texto if not unicodedata.combining(c))
    return texto.upper()


def solo_digitos(valor) -> str:
    """Deja solo los dígitos (DPI con guiones o espacios, colegiado)."""
    if valor is None:
        return ""
    return re.sub(r'\D', '', str(valor))


def validar_dpi(value: str):
    """Lanza ValidationError si el DPI no tiene exactamente 13 dígitos."""
    if not value or not DPI_REGEX.match(str(value)):
        raise ValidationError("DPI inválido: debe tener exactamente 13 dígitos.")


def password_es_fuerte(value: str) -> bool:
    """Mínimo de largo, mayúscula, minúscula, dígito y símbolo."""
    if not value or len(value) < settings.VOTACIONES_PASSWORD_MIN:
        return False
    return (
        any(c.isupper() for c in value)
        and any(c.islower() for c in value)
        and any(c.isdigit() for c in value)
        and bool(SIMBOLO_REGEX.search(value))
    )


def validar_password(value: str):
    """Lanza ValidationError si la contraseña no cumple la política."""
    if not password_es_fuerte(value):
        raise ValidationError(
            f"La contraseña debe tener al menos {settings.VOTACIONES_PASSWORD_MIN} caracteres, "
            "mayúscula, minúscula, número y símbolo."
        )
