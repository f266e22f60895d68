from sqlalchemy import Column, Integer, String, JSON
from ..db.database import Base

class KvEntry(Base):
    __tablename__ = 'kv_store'
    # id preserves insertion order for prefix scans
    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True, nullable=False, index=True)
    value = Column(JSON)
