import uuid
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_document_id() -> str:
    """Opaque string ids, like the hosted document store hands out"""
    return uuid.uuid4().hex


class BaseModel:
    """Mixin giving every document table an opaque string primary key"""

    id = Column(String(64), primary_key=True, default=generate_document_id)
