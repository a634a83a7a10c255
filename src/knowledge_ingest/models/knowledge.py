from sqlalchemy import Column, String, Text, Integer, JSON, Enum, Index
from knowledge_ingest.models.base import Base, CreatedAtMixin
from knowledge_ingest.policy import OwnerKind

class KnowledgeChunk(Base, CreatedAtMixin):
    __tablename__ = "knowledge_chunks"

    id = Column(String, primary_key=True)
    owner_kind = Column(Enum(OwnerKind), nullable=False)
    owner_id = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)
    embedding = Column(JSON)  # vector as a JSON array of floats
    file_name = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    file_hash = Column(String(64), nullable=False)
    chunk_index = Column(Integer, nullable=False)
    total_chunks = Column(Integer, nullable=False)
    # "metadata" is reserved on declarative classes
    chunk_metadata = Column("metadata", JSON, default=dict)

    __table_args__ = (
        Index("ix_knowledge_chunks_owner_hash", "owner_kind", "owner_id", "file_hash"),
        Index("ix_knowledge_chunks_owner_name", "owner_kind", "owner_id", "file_name"),
    )
    # Fetch server-generated created_at in the INSERT itself
    __mapper_args__ = {"eager_defaults": True}
