from store_common.database import DatabaseManager, Base
from .config import DATABASE_URL

# Inicialización del Manager común
db_manager = DatabaseManager(DATABASE_URL)

# Exportamos las herramientas para el resto de la app
engine = db_manager.engine
get_db = db_manager.get_db
Base = Base
AsyncSessionLocal = db_manager.session_factory
