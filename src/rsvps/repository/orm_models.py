from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class LocalStoreEntry(Base, TimeStamp):
    """One key of the on-device key-value store used as the RSVP fallback."""

    __tablename__ = TableNames.LOCAL_STORE.value

    key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<LocalStoreEntry {self.key}>"
