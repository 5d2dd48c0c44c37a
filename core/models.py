"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:           Este archivo define el modelo fundamental de la
                       aplicación: 'Ingeniero', la entrada del padrón del
                       Colegio. Un ingeniero es a la vez miembro habilitado
                       para votar y cuenta del sistema (credenciales y rol
                       de administrador).
--------------------------------------------------------------------------------
"""

# Importa el módulo base de modelos de Django para interactuar con la base de datos.
from django.db import models
# Importa Q para construir restricciones a nivel de base de datos.
from django.db.models import Q
# Funciones de hash de contraseñas de Django (PBKDF2 por defecto).
from django.contrib.auth.hashers import check_password, make_password


class Ingeniero(models.Model):
    """
    Miembro del padrón de ingenieros colegiados.
    Se crea por sincronización/importación y se completa con el auto-registro.
    Nunca se borra en operación normal: solo se desactiva.
    """

    # Número de colegiado: identificador único del miembro.
    colegiado = models.CharField(max_length=50, unique=True, verbose_name="Colegiado")
    # Nombre completo tal como figura en el padrón (autoritativo).
    nombre = models.CharField(max_length=200, verbose_name="Nombre completo")
    # Solo los ingenieros activos pueden registrarse, iniciar sesión y votar.
    activo = models.BooleanField(default=True, db_index=True, verbose_name="Activo")

    # Campos opcionales: NULL puede repetirse, un valor no.
    email = models.EmailField(max_length=254, unique=True, null=True, blank=True)
    dpi = models.CharField(max_length=20, unique=True, null=True, blank=True, verbose_name="DPI")
    fecha_nacimiento = models.DateField(null=True, blank=True, verbose_name="Fecha de nacimiento")

    # Hash de la contraseña. NULL = aún no se registra.
    password_hash = models.CharField(max_length=255, null=True, blank=True, editable=False)
    # Marca de administrador de la plataforma.
    is_admin = models.BooleanField(default=False, verbose_name="Administrador")

    # Fechas de auditoría automáticas.
    creado = models.DateTimeField(auto_now_add=True)
    actualizado = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "engineers"
        ordering = ["nombre", "id"]
        verbose_name = "Ingeniero"
        verbose_name_plural = "Ingenieros"
        constraints = [
            # El colegiado nunca puede quedar vacío.
            models.CheckConstraint(name="engineers_colegiado_not_empty", condition=~Q(colegiado="")),
        ]

    def __str__(self):
        return f"{self.colegiado} - {self.nombre}"

    @property
    def tiene_cuenta(self) -> bool:
        """True si el ingeniero ya completó su registro."""
        return bool(self.password_hash)

    def set_password(self, raw_password: str):
        # No guarda; el llamador decide cuándo persistir.
        self.password_hash = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password(raw_password, self.password_hash)
