"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Serializadores de entrada/salida para autenticación y gestión del
               padrón. Validan formato (dígitos, largos, email, DPI, contraseña)
               antes de llegar a la lógica de negocio.
--------------------------------------------------------------------------------
"""
from django.core.validators import RegexValidator
from rest_framework import serializers

from core.models import Ingeniero
from core.validators import validar_dpi, validar_password

REQUERIDO = {"required": "Campos requeridos faltantes", "blank": "Campos requeridos faltantes"}


class RegistroSerializer(serializers.Serializer):
    colegiado = serializers.CharField(
        min_length=3,
        max_length=50,
        validators=[RegexValidator(r'^\d+$', "Colegiado debe contener sólo dígitos")],
        error_messages={"min_length": "Colegiado demasiado corto"},
    )
    nombre = serializers.CharField(
        min_length=3, max_length=200, error_messages={"min_length": "Nombre demasiado corto"}
    )
    email = serializers.EmailField(error_messages={"invalid": "Correo inválido"})
    dpi = serializers.CharField(
        validators=[validar_dpi],
    )
    fecha_nacimiento = serializers.CharField()
    password = serializers.CharField(
        trim_whitespace=False,
        validators=[validar_password],
    )


class LoginSerializer(serializers.Serializer):
    colegiado = serializers.CharField(error_messages=REQUERIDO)
    dpi = serializers.CharField(error_messages=REQUERIDO)
    fecha_nacimiento = serializers.CharField(error_messages=REQUERIDO)
    password = serializers.CharField(trim_whitespace=False, error_messages=REQUERIDO)


class AdminLoginSerializer(serializers.Serializer):
    """Acepta colegiado o email (o 'usuario', cualquiera de los dos)."""
    colegiado = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    usuario = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(trim_whitespace=False, error_messages=REQUERIDO)

    def validate(self, data):
        identificador = data.get("colegiado") or data.get("email") or data.get("usuario")
        if not identificador:
            raise serializers.ValidationError("Campos requeridos faltantes")
        data["identificador"] = identificador.strip()
        return data


class IngenieroSerializer(serializers.ModelSerializer):
    """Vista administrativa de un ingeniero (sin hash ni datos sensibles)."""
    tiene_cuenta = serializers.BooleanField(read_only=True)

    class Meta:
        model = Ingeniero
        fields = ["id", "colegiado", "nombre", "email", "activo", "is_admin", "tiene_cuenta"]
        read_only_fields = fields


class IngenieroPatchSerializer(serializers.Serializer):
    nombre = serializers.CharField(required=False, min_length=3, max_length=200)
    email = serializers.EmailField(required=False)
    activo = serializers.BooleanField(required=False)
    password = serializers.CharField(
        required=False,
        trim_whitespace=False,
        min_length=8,
        error_messages={"min_length": "Password débil"},
    )


class SincronizarPadronSerializer(serializers.Serializer):
    # Cada item: {colegiado, nombre, activo?, dpi?, fecha_nacimiento?, email?}
    items = serializers.ListField(
        child=serializers.DictField(),
        error_messages={"required": "Formato inválido", "not_a_list": "Formato inválido"},
    )
