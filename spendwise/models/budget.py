from datetime import datetime
from ..extensions import db


class Budget(db.Model):
    __tablename__ = "budgets"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    month = db.Column(db.String(7), nullable=False)  # e.g., '2025-10'
    monthly_income = db.Column(db.Integer, nullable=False)  # cents
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("user_id", "month", name="uq_user_month"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "month": self.month,
            "monthlyIncome": self.monthly_income,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
