"""
Service job tracking: battery checks, charging and repairs billed at the counter.
"""
import logging
from typing import List, Dict, Any, Optional

from sqlalchemy.orm import Session
from sqlalchemy import desc

from powercell.core.exceptions import NotFoundError, InvalidStatusTransitionError
from powercell.models.services import ServiceJob, ServiceStatus

logger = logging.getLogger(__name__)

_WORKFLOW = [ServiceStatus.PENDING, ServiceStatus.IN_PROGRESS, ServiceStatus.COMPLETED]


def service_to_dict(job: ServiceJob) -> Dict[str, Any]:
    return {
        "id": job.id,
        "customer_name": job.customer_name,
        "contact_number": job.contact_number,
        "vehicle_details": job.vehicle_details,
        "battery_brand": job.battery_brand,
        "battery_model": job.battery_model,
        "status": job.status.value,
        "service_charge": job.service_charge,
        "assigned_to": job.assigned_to,
        "pickup_date": job.pickup_date.isoformat() if job.pickup_date else None,
        "created_at": job.created_at.isoformat() if job.created_at else None,
    }


class ServiceJobManager:
    """Service for creating service jobs and moving them through the workflow."""

    async def create_job(self, db: Session, job_data: Dict[str, Any]) -> ServiceJob:
        job = ServiceJob(**job_data)
        db.add(job)
        db.commit()
        db.refresh(job)
        logger.info(f"Service job {job.id} created for {job.customer_name}")
        return job

    async def get_job(self, db: Session, job_id: int) -> ServiceJob:
        job = db.query(ServiceJob).filter(ServiceJob.id == job_id).first()
        if not job:
            raise NotFoundError(f"Service job {job_id} not found")
        return job

    async def list_jobs(self, db: Session, status: Optional[ServiceStatus] = None) -> List[ServiceJob]:
        query = db.query(ServiceJob)
        if status:
            query = query.filter(ServiceJob.status == status)
        return query.order_by(desc(ServiceJob.created_at), desc(ServiceJob.id)).all()

    async def update_status(self, db: Session, job_id: int, new_status: ServiceStatus) -> ServiceJob:
        """Advance a job exactly one step: pending -> in_progress -> completed."""
        job = db.query(ServiceJob).filter(ServiceJob.id == job_id).with_for_update().first()
        if not job:
            raise NotFoundError(f"Service job {job_id} not found")

        current = _WORKFLOW.index(job.status)
        if _WORKFLOW.index(new_status) != current + 1:
            raise InvalidStatusTransitionError(
                f"Service job {job_id} cannot move from {job.status.value} to {new_status.value}",
                payload={"service_id": job_id, "status": job.status.value},
            )

        job.status = new_status
        db.commit()
        db.refresh(job)
        logger.info(f"Service job {job_id} is now {new_status.value}")
        return job

    async def assign(self, db: Session, job_id: int, staff_name: str) -> ServiceJob:
        job = await self.get_job(db, job_id)
        job.assigned_to = staff_name
        db.commit()
        db.refresh(job)
        return job
