from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Ingeniero",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("colegiado", models.CharField(max_length=50, unique=True, verbose_name="Colegiado")),
                ("nombre", models.CharField(max_length=200, verbose_name="Nombre completo")),
                ("activo", models.BooleanField(db_index=True, default=True, verbose_name="Activo")),
                ("email", models.EmailField(blank=True, max_length=254, null=True, unique=True)),
                ("dpi", models.CharField(blank=True, max_length=20, null=True, unique=True, verbose_name="DPI")),
                ("fecha_nacimiento", models.DateField(blank=True, null=True, verbose_name="Fecha de nacimiento")),
                ("password_hash", models.CharField(blank=True, editable=False, max_length=255, null=True)),
                ("is_admin", models.BooleanField(default=False, verbose_name="Administrador")),
                ("creado", models.DateTimeField(auto_now_add=True)),
                ("actualizado", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Ingeniero",
                "verbose_name_plural": "Ingenieros",
                "db_table": "engineers",
                "ordering": ["nombre", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("colegiado", ""), _negated=True),
                        name="engineers_colegiado_not_empty",
                    )
                ],
            },
        ),
    ]
