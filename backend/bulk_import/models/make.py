from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bulk_import.db.base import Base, IntegerIDMixin, SoftDeleteMixin, TimestampMixin


class Make(Base, IntegerIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "makes"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
