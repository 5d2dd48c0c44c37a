"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Serializadores de entrada para campañas y votos. Validan tipos,
               rangos y fechas; la salida la arma el repositorio de campañas.
--------------------------------------------------------------------------------
"""
from rest_framework import serializers


class CandidatoEntradaField(serializers.JSONField):
    """Un candidato: texto (nombre) u objeto {id | ingeniero_id | nombre, bio?, foto_url?}."""

    def to_internal_value(self, data):
        data = super().to_internal_value(data)
        if isinstance(data, str):
            return data
        if not isinstance(data, dict):
            raise serializers.ValidationError("Candidato inválido")
        for campo in ("id", "ingeniero_id"):
            if campo in data and data[campo] not in (None, ""):
                try:
                    data[campo] = int(data[campo])
                except (TypeError, ValueError):
                    raise serializers.ValidationError(f"{campo} inválido")
        return data


class CampanaSerializer(serializers.Serializer):
    titulo = serializers.CharField(max_length=200)
    descripcion = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    votos_por_votante = serializers.IntegerField(min_value=1)
    habilitada = serializers.BooleanField(required=False)
    inicia_en = serializers.DateTimeField()
    termina_en = serializers.DateTimeField()
    candidatos = serializers.ListField(child=CandidatoEntradaField(), required=False)

    def validate(self, data):
        inicio = data.get("inicia_en")
        fin = data.get("termina_en")
        # En edición parcial solo se compara si vienen ambos; el resto lo valida el repositorio
        if inicio is not None and fin is not None and inicio >= fin:
            raise serializers.ValidationError("Rango de fechas inválido")
        return data


class VotoSerializer(serializers.Serializer):
    candidato_id = serializers.IntegerField(
        min_value=1,
        error_messages={"required": "Candidato requerido", "invalid": "Candidato inválido"},
    )
