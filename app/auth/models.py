import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class User(Base):
    """Portal user. Role is fixed at provisioning: admin, staff or student."""

    __tablename__ = "users"
    __table_args__ = (
        # Students must carry a student number
        CheckConstraint(
            "(role = 'student' AND student_id IS NOT NULL) OR (role != 'student')",
            name="ck_users_student_id_required",
        ),
        CheckConstraint("role IN ('admin', 'staff', 'student')", name="ck_users_role"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    role = Column(String(20), nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    student_id = Column(String(50), nullable=True, unique=True)
    department = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    account = relationship("Account", back_populates="owner", uselist=False)
