import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Candidato",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=200, verbose_name="Nombre")),
                ("bio", models.TextField(blank=True, null=True, verbose_name="Biografía")),
                ("foto_url", models.CharField(blank=True, max_length=500, null=True, verbose_name="Foto")),
                (
                    "ingeniero",
                    models.OneToOneField(
                        blank=True,
                        db_column="engineer_id",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="candidatura",
                        to="core.ingeniero",
                    ),
                ),
            ],
            options={
                "verbose_name": "Candidato",
                "verbose_name_plural": "Candidatos",
                "db_table": "candidates",
            },
        ),
        migrations.CreateModel(
            name="Campana",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("titulo", models.CharField(max_length=200, verbose_name="Título")),
                ("descripcion", models.TextField(blank=True, null=True, verbose_name="Descripción")),
                ("votos_por_votante", models.PositiveIntegerField(default=1, verbose_name="Votos por votante")),
                ("habilitada", models.BooleanField(db_index=True, default=True)),
                ("inicia_en", models.DateTimeField(db_index=True, verbose_name="Inicio")),
                ("termina_en", models.DateTimeField(db_index=True, verbose_name="Cierre")),
                ("creado", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Campaña",
                "verbose_name_plural": "Campañas",
                "db_table": "campaigns",
                "ordering": ["-inicia_en", "-id"],
                "indexes": [models.Index(fields=["habilitada", "termina_en"], name="campaigns_hab_cierre_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("votos_por_votante__gte", 1)),
                        name="campaigns_votos_por_votante_min_1",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("inicia_en__lt", models.F("termina_en"))),
                        name="campaigns_inicio_antes_de_cierre",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CampanaCandidato",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bio", models.TextField(blank=True, null=True)),
                ("orden", models.PositiveIntegerField(default=0)),
                (
                    "campana",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vinculos",
                        to="votaciones.campana",
                    ),
                ),
                (
                    "candidato",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vinculos",
                        to="votaciones.candidato",
                    ),
                ),
            ],
            options={
                "verbose_name": "Candidato en campaña",
                "verbose_name_plural": "Candidatos en campaña",
                "db_table": "campaign_candidates",
                "ordering": ["orden", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("campana", "candidato"), name="campaign_candidates_unico"),
                ],
            },
        ),
        migrations.AddField(
            model_name="campana",
            name="candidatos",
            field=models.ManyToManyField(
                related_name="campanas",
                through="votaciones.CampanaCandidato",
                to="votaciones.candidato",
            ),
        ),
        migrations.CreateModel(
            name="Voto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("creado", models.DateTimeField(auto_now_add=True)),
                (
                    "campana",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votos",
                        to="votaciones.campana",
                    ),
                ),
                (
                    "candidato",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votos",
                        to="votaciones.candidato",
                    ),
                ),
                (
                    "votante",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votos",
                        to="core.ingeniero",
                    ),
                ),
            ],
            options={
                "verbose_name": "Voto",
                "verbose_name_plural": "Votos",
                "db_table": "votes",
                "indexes": [
                    models.Index(fields=["campana", "votante"], name="votes_campana_votante_idx"),
                    models.Index(fields=["campana", "candidato"], name="votes_campana_candidato_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("campana", "votante", "candidato"), name="votes_unico_por_candidato"
                    ),
                ],
            },
        ),
    ]
