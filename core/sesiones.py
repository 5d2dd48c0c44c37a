"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Emisión y verificación de tokens de sesión firmados.
                       El token es un payload firmado con SECRET_KEY (HMAC) y
                       sellado con la hora de emisión; expira según
                       SESION_DURACION_SEGUNDOS.
--------------------------------------------------------------------------------
"""

from dataclasses import dataclass

from django.conf import settings
from django.core import signing

from core.excepciones import NoAutorizado
from core.roles import ROLES


@dataclass(frozen=True)
class Sesion:
    """Principal autenticado que DRF deja en request.user."""
    id: int
    rol: str
    colegiado: str
    nombre: str
    email: str | None = None

    # Compatibilidad con los chequeos de DRF/Django
    is_authenticated = True
    is_anonymous = False

    def como_dict(self) -> dict:
        return {
            "id": self.id,
            "rol": self.rol,
            "colegiado": self.colegiado,
            "nombre": self.nombre,
            "email": self.email,
        }


def emitir_token(ingeniero, rol: str) -> str:
    """Firma un token para el ingeniero con el rol indicado."""
    payload = {
        "sub": ingeniero.pk,
        "rol": rol,
        "colegiado": ingeniero.colegiado,
        "nombre": ingeniero.nombre,
    }
    if ingeniero.email:
        payload["email"] = ingeniero.email
    return signing.dumps(payload, salt=settings.SESION_SALT, compress=True)


def verificar_token(token: str) -> Sesion:
    """
    Verifica firma y vigencia.
    Lanza NoAutorizado('Token expirado') o NoAutorizado('Token inválido').
    """
    try:
        payload = signing.loads(
            token,
            salt=settings.SESION_SALT,
            max_age=settings.SESION_DURACION_SEGUNDOS,
        )
    except signing.SignatureExpired:
        raise NoAutorizado("Token expirado")
    except signing.BadSignature:
        raise NoAutorizado("Token inválido")

    try:
        sesion = Sesion(
            id=int(payload["sub"]),
            rol=payload["rol"],
            colegiado=str(payload["colegiado"]),
            nombre=payload.get("nombre", ""),
            email=payload.get("email"),
        )
    except (KeyError, TypeError, ValueError):
        raise NoAutorizado("Token inválido")

    if sesion.rol not in ROLES:
        raise NoAutorizado("Token inválido")
    return sesion
