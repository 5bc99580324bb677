from taskhub.database.collection import DocCollection
from taskhub.database.supabase_client import Database

__all__ = ["Database", "DocCollection"]
