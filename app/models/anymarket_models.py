"""
Modelos da integração Anymarket
"""
from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from app.config.database import Base


class AnymarketProduct(Base):
    """Mapeamento produto Anymarket <-> produto VTEX"""
    __tablename__ = "anymarket"

    id = Column(Integer, primary_key=True, index=True)
    id_produto_any = Column(BigInteger, nullable=False, unique=True, index=True)
    ref_vtex = Column(String(100), nullable=False, index=True)
    id_produto_vtex = Column(BigInteger, index=True)
    title = Column(String(500))

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "id_produto_any": self.id_produto_any,
            "ref_vtex": self.ref_vtex,
            "id_produto_vtex": self.id_produto_vtex,
            "title": self.title,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class AnymarketSyncLog(Base):
    """Histórico de atualizações enviadas ao Anymarket"""
    __tablename__ = "anymarket_sync_logs"

    id = Column(Integer, primary_key=True, index=True)
    id_produto_vtex = Column(BigInteger, index=True)
    id_produto_any = Column(BigInteger, index=True)
    title = Column(String(500))
    description = Column(Text)
    sync_type = Column(String(50), default="product_update")
    action = Column(String(50))
    response_data = Column(JSON)
    error_message = Column(Text)

    created_at = Column(DateTime, default=func.now(), index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "id_produto_vtex": self.id_produto_vtex,
            "id_produto_any": self.id_produto_any,
            "title": self.title,
            "description": self.description,
            "sync_type": self.sync_type,
            "action": self.action,
            "response_data": self.response_data,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
