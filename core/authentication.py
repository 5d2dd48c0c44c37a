"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Define el backend de autenticación de la API:
                       'AutenticacionBearer' lee el encabezado
                       'Authorization: Bearer <token>' y deja en request.user
                       la sesión firmada del ingeniero.
--------------------------------------------------------------------------------
"""

# Importa la clase base de autenticación de DRF.
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from core.excepciones import NoAutorizado
from core.sesiones import verificar_token


class AutenticacionBearer(BaseAuthentication):
    """Autenticación por token firmado en el encabezado Authorization."""

    keyword = "Bearer"

    def authenticate(self, request):
        """
        Retorna (sesion, token) si hay un token válido.
        Sin encabezado retorna None (petición anónima).
        """
        partes = get_authorization_header(request).split()

        # Sin encabezado o con otro esquema: anónimo.
        if not partes or partes[0].lower() != self.keyword.lower().encode():
            return None

        if len(partes) != 2:
            raise NoAutorizado("Token inválido")

        try:
            token = partes[1].decode()
        except UnicodeError:
            raise NoAutorizado("Token inválido")

        return (verificar_token(token), token)

    def authenticate_header(self, request):
        # Hace que DRF responda 401 (y no 403) cuando falta o falla el token.
        return self.keyword
