from datetime import datetime
from ..extensions import db
from ..formatting import format_currency
from ..periods import is_current_period, period_label


class Budget(db.Model):
    __tablename__ = "budgets"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    category = db.Column(db.String(50), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    notes = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "category", "month", "year", name="uq_user_category_period"),
        db.Index("ix_budgets_user_period", "user_id", "month", "year"),
    )

    @property
    def period(self):
        return period_label(self.month, self.year)

    def is_current_period(self, today=None):
        return is_current_period(self.month, self.year, today)

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "category": self.category,
            "amount": self.amount,
            "month": self.month,
            "year": self.year,
            "isActive": self.is_active,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "formattedAmount": format_currency(self.amount),
            "period": self.period,
            "isCurrentPeriod": self.is_current_period(),
        }
