"""
Service job endpoints.
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from powercell.core.database import get_db
from powercell.core.exceptions import ShopError
from powercell.models.services import ServiceStatus
from powercell.services.service_jobs import ServiceJobManager, service_to_dict

router = APIRouter()
service_jobs = ServiceJobManager()


class ServiceCreateRequest(BaseModel):
    """Request model for opening a service job."""
    customer_name: str = Field(..., min_length=1, description="Customer name")
    contact_number: str = Field(..., min_length=1, description="Customer phone")
    vehicle_details: str = Field(..., min_length=1, description="Vehicle")
    battery_brand: Optional[str] = Field(None, description="Battery brand")
    battery_model: Optional[str] = Field(None, description="Battery model")
    service_charge: float = Field(0, ge=0, description="Service charge")
    assigned_to: Optional[str] = Field(None, description="Staff member")
    pickup_date: Optional[date] = Field(None, description="Pickup date")


class ServiceStatusRequest(BaseModel):
    status: ServiceStatus


class ServiceAssignRequest(BaseModel):
    staff_name: str = Field(..., min_length=1)


@router.post("", status_code=201)
async def create_service(
    request: ServiceCreateRequest,
    db: Session = Depends(get_db)
):
    try:
        job = await service_jobs.create_job(db, request.model_dump())
        return service_to_dict(job)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create service job: {str(e)}")


@router.get("")
async def list_services(
    status: Optional[ServiceStatus] = None,
    db: Session = Depends(get_db)
):
    try:
        jobs = await service_jobs.list_jobs(db, status=status)
        return [service_to_dict(job) for job in jobs]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get service jobs: {str(e)}")


@router.get("/{service_id}")
async def get_service(
    service_id: int,
    db: Session = Depends(get_db)
):
    try:
        job = await service_jobs.get_job(db, service_id)
        return service_to_dict(job)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get service job: {str(e)}")


@router.put("/{service_id}/status")
async def update_service_status(
    service_id: int,
    request: ServiceStatusRequest,
    db: Session = Depends(get_db)
):
    """Move a job to the next workflow step."""
    try:
        job = await service_jobs.update_status(db, service_id, request.status)
        return service_to_dict(job)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update service job: {str(e)}")


@router.put("/{service_id}/assign")
async def assign_service(
    service_id: int,
    request: ServiceAssignRequest,
    db: Session = Depends(get_db)
):
    try:
        job = await service_jobs.assign(db, service_id, request.staff_name)
        return service_to_dict(job)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to assign service job: {str(e)}")
