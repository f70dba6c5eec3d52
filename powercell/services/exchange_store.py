"""
Exchange Credit Store: buy-back valuations for old batteries and their
one-time redemption against a sale.
"""
import logging
from typing import List, Dict, Any, Optional

from sqlalchemy.orm import Session
from sqlalchemy import desc

from powercell.core.exceptions import NotFoundError, ExchangeAlreadyConsumedError, ValidationError
from powercell.models.exchanges import ExchangeRecord, ExchangeStatus

logger = logging.getLogger(__name__)

# Buy-back rate for scrap lead-acid batteries, per kg
BASE_RATE_PER_KG = 150
CONDITION_MULTIPLIERS = {
    "Excellent": 1.2,
    "Good": 1.0,
    "Fair": 0.7,
    "Poor": 0.4,
}
AGE_DEPRECIATION_PER_YEAR = 0.1


def estimate_value(weight_kg: float, condition: str, age_years: float) -> int:
    """
    Value an old battery for exchange.

    weight x base rate, scaled by condition and depreciated 10% per year of
    age (never below zero), rounded to whole rupees.
    """
    if weight_kg < 0 or age_years < 0:
        raise ValidationError("Weight and age must be non-negative")
    if condition not in CONDITION_MULTIPLIERS:
        raise ValidationError(
            f"Unknown condition '{condition}', expected one of {', '.join(CONDITION_MULTIPLIERS)}"
        )

    value = weight_kg * BASE_RATE_PER_KG
    value *= CONDITION_MULTIPLIERS[condition]
    value *= max(0.0, 1 - age_years * AGE_DEPRECIATION_PER_YEAR)
    return round(value)


def exchange_to_dict(record: ExchangeRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "customer_name": record.customer_name,
        "customer_phone": record.customer_phone,
        "customer_address": record.customer_address,
        "battery_brand": record.battery_brand,
        "battery_model": record.battery_model,
        "valuation_amount": record.valuation_amount,
        "status": record.status.value,
        "created_at": record.created_at.isoformat() if record.created_at else None,
    }


class ExchangeCreditStore:
    """Tracks exchange credits and makes sure each is redeemed at most once."""

    async def create_record(self, db: Session, record_data: Dict[str, Any]) -> ExchangeRecord:
        """Record a staff valuation of a customer's old battery."""
        record = ExchangeRecord(status=ExchangeStatus.PENDING, **record_data)
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info(f"Exchange record {record.id} created for {record.customer_name}: {record.valuation_amount}")
        return record

    async def get_record(self, db: Session, record_id: int) -> ExchangeRecord:
        record = db.query(ExchangeRecord).filter(ExchangeRecord.id == record_id).first()
        if not record:
            raise NotFoundError(f"Exchange record {record_id} not found")
        return record

    async def list_records(self, db: Session) -> List[ExchangeRecord]:
        return db.query(ExchangeRecord).order_by(
            desc(ExchangeRecord.created_at), desc(ExchangeRecord.id)
        ).all()

    async def list_pending(self, db: Session, customer_name: Optional[str] = None) -> List[ExchangeRecord]:
        """Pending credits, newest first, optionally matching part of a customer name."""
        query = db.query(ExchangeRecord).filter(ExchangeRecord.status == ExchangeStatus.PENDING)

        if customer_name:
            query = query.filter(ExchangeRecord.customer_name.ilike(f"%{customer_name}%"))

        return query.order_by(desc(ExchangeRecord.created_at), desc(ExchangeRecord.id)).all()

    async def consume(self, db: Session, record_id: int) -> ExchangeRecord:
        """
        Redeem a pending credit.

        Locks the record row before checking its status, and does not commit:
        the change belongs to the transaction of the sale redeeming it.
        Consuming twice is an error.
        """
        record = db.query(ExchangeRecord).filter(
            ExchangeRecord.id == record_id
        ).with_for_update().first()

        if not record:
            raise NotFoundError(
                f"Exchange record {record_id} not found",
                payload={"exchange_record_id": record_id}
            )
        if record.status != ExchangeStatus.PENDING:
            logger.warning(f"Exchange record {record_id} already consumed")
            raise ExchangeAlreadyConsumedError(record_id)

        record.status = ExchangeStatus.CONSUMED
        return record
