from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z, utcnow

ROLE_CUSTOMER = 0
ROLE_ADMIN = 1


class User(db.Model):
    """
    Shopper and administrator accounts.

    Email is unique as stored (case-sensitive). The registration workflow
    checks for an existing email first; the unique constraint is what holds
    when two registrations race.

    `answer` is the security-question answer used by forgot-password.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    phone = db.Column(db.String(32), nullable=False)
    address = db.Column(db.Text, nullable=False)
    answer = db.Column(db.String(255), nullable=False)

    # 0 = customer, 1 = administrator
    role = db.Column(db.Integer, nullable=False, default=ROLE_CUSTOMER)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"

    def to_dict(self) -> dict:
        # Never expose password_hash or the security answer
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "role": self.role,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
