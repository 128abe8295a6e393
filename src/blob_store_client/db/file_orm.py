from sqlalchemy import BigInteger, Integer, LargeBinary, String
from sqlalchemy.dialects.mysql import LONGBLOB
from sqlalchemy.orm import Mapped, mapped_column

from blob_store_client.db.base import Base, CreatedAt, UpdatedAt

class FileORM(Base):
    __tablename__ = "files"

    # На SQLite автоинкремент работает только для INTEGER PRIMARY KEY
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    blob: Mapped[bytes] = mapped_column(
        LargeBinary().with_variant(LONGBLOB(), "mysql", "mariadb"), nullable=False, default=b""
    )
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    created_at: Mapped[CreatedAt]
    updated_at: Mapped[UpdatedAt]


# Колонки без blob: используются для частичной перезагрузки после изменений
FILE_META_COLUMNS = (
    FileORM.__table__.c.id,
    FileORM.__table__.c.name,
    FileORM.__table__.c.size,
    FileORM.__table__.c.created_at,
    FileORM.__table__.c.updated_at,
)
