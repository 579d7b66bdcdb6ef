from datetime import datetime
from ..extensions import db


class Expense(db.Model):
    __tablename__ = "expenses"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    category = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Integer, nullable=False)  # cents
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    description = db.Column(db.Text)

    # Set only on rows produced by an installment batch
    installments = db.Column(db.Integer)
    installment_number = db.Column(db.Integer)
    original_purchase_date = db.Column(db.String(10))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "category": self.category,
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "installments": self.installments,
            "installmentNumber": self.installment_number,
            "originalPurchaseDate": self.original_purchase_date,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
