"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Definición de modelos para el sistema de Votaciones: campañas,
               candidatos, el vínculo campaña-candidato (con biografía propia
               de la campaña) y el registro de votos. Los conteos nunca se
               guardan: siempre se agregan desde la tabla de votos.
--------------------------------------------------------------------------------
"""
from django.db import models
from django.db.models import F, Q

from core.models import Ingeniero


# 1. Modelo Campaña
class Campana(models.Model):
    titulo = models.CharField(max_length=200, verbose_name="Título")
    descripcion = models.TextField(blank=True, null=True, verbose_name="Descripción")
    votos_por_votante = models.PositiveIntegerField(default=1, verbose_name="Votos por votante")
    habilitada = models.BooleanField(default=True, db_index=True)
    inicia_en = models.DateTimeField(verbose_name="Inicio", db_index=True)
    termina_en = models.DateTimeField(verbose_name="Cierre", db_index=True)
    candidatos = models.ManyToManyField(
        "Candidato",
        through="CampanaCandidato",
        related_name="campanas",
    )
    creado = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.titulo

    class Meta:
        db_table = "campaigns"
        ordering = ["-inicia_en", "-id"]
        indexes = [
            models.Index(fields=["habilitada", "termina_en"], name="campaigns_hab_cierre_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="campaigns_votos_por_votante_min_1", condition=Q(votos_por_votante__gte=1)),
            models.CheckConstraint(name="campaigns_inicio_antes_de_cierre", condition=Q(inicia_en__lt=F("termina_en"))),
        ]
        verbose_name = "Campaña"
        verbose_name_plural = "Campañas"


# 2. Modelo Candidato
class Candidato(models.Model):
    nombre = models.CharField(max_length=200, verbose_name="Nombre")
    bio = models.TextField(blank=True, null=True, verbose_name="Biografía")
    foto_url = models.CharField(max_length=500, blank=True, null=True, verbose_name="Foto")
    # Candidatos que son ingenieros del padrón; también se permiten libres
    ingeniero = models.OneToOneField(
        Ingeniero,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="candidatura",
        db_column="engineer_id",
    )

    def __str__(self):
        return self.nombre

    class Meta:
        db_table = "candidates"
        verbose_name = "Candidato"
        verbose_name_plural = "Candidatos"


# 3. Vínculo campaña-candidato
class CampanaCandidato(models.Model):
    campana = models.ForeignKey(Campana, on_delete=models.CASCADE, related_name="vinculos")
    candidato = models.ForeignKey(Candidato, on_delete=models.CASCADE, related_name="vinculos")
    # Biografía específica de esta campaña (reemplaza la del candidato)
    bio = models.TextField(blank=True, null=True)
    orden = models.PositiveIntegerField(default=0)

    @property
    def bio_efectiva(self):
        return self.bio or self.candidato.bio

    def __str__(self):
        return f"{self.campana_id} - {self.candidato}"

    class Meta:
        db_table = "campaign_candidates"
        ordering = ["orden", "id"]
        constraints = [
            models.UniqueConstraint(fields=["campana", "candidato"], name="campaign_candidates_unico"),
        ]
        verbose_name = "Candidato en campaña"
        verbose_name_plural = "Candidatos en campaña"


# 4. Modelo Voto (registro inmutable)
class Voto(models.Model):
    campana = models.ForeignKey(Campana, on_delete=models.CASCADE, related_name="votos")
    candidato = models.ForeignKey(Candidato, on_delete=models.CASCADE, related_name="votos")
    votante = models.ForeignKey(Ingeniero, on_delete=models.CASCADE, related_name="votos")
    creado = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "votes"
        constraints = [
            # Un votante no vota dos veces por el mismo candidato en la misma campaña
            models.UniqueConstraint(fields=["campana", "votante", "candidato"], name="votes_unico_por_candidato"),
        ]
        indexes = [
            models.Index(fields=["campana", "votante"], name="votes_campana_votante_idx"),
            models.Index(fields=["campana", "candidato"], name="votes_campana_candidato_idx"),
        ]
        verbose_name = "Voto"
        verbose_name_plural = "Votos"

    def __str__(self):
        return f"{self.votante_id} -> {self.candidato_id} (campaña {self.campana_id})"
