from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class EmailLog(Base, TimeStamp):
    """One dispatch attempt through the email relay."""

    __tablename__ = TableNames.EMAIL_LOGS.value

    to_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email_type: Mapped[str] = mapped_column(String(50), nullable=False)
    template_id: Mapped[str] = mapped_column(String(100), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    rsvp_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    # pending, sent or failed
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<EmailLog {self.email_type} to {self.to_address} - {self.status}>"
