"""
--------------------------------------------------------------------------------
Integrantes:           Matias Pinilla, Herna Leris, Kassandra Ramos
Fecha de Modificación: 19/10/2026
Descripción:   Inicializador del paquete del proyecto. Configura PyMySQL como 
               driver de MySQL para que Django pueda conectarse a MySQL/TiDB 
               cuando DATABASE_URL apunta a ese motor.
--------------------------------------------------------------------------------
"""
import pymysql  # Importa la librería PyMySQL para interactuar con bases de datos MySQL
pymysql.install_as_MySQLdb()  # Instala PyMySQL como reemplazo de MySQLdb
