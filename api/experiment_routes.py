from fastapi import APIRouter, status
from sqlalchemy.orm import Session

from data.database import Tenant
from models.experiments import ExperimentCreate, ExperimentUpdate, ExperimentResponse, ExperimentDetailResponse
from services import experiments
from api.depends import CURRENT_TENANT, DB_DEPENDENCY

import logging

logger = logging.getLogger(__name__)

experiment_router = APIRouter(
    prefix="/experiments",
    tags=["experiments"],
)


# POST /experiments
@experiment_router.post(
    "",
    response_model=ExperimentResponse,
    status_code=status.HTTP_201_CREATED
)
def create_experiment_route(
    experiment_data: ExperimentCreate,
    tenant: Tenant = CURRENT_TENANT,
    db: Session = DB_DEPENDENCY
):
    """Create an A/B test configuration."""
    return experiments.create_experiment(db, tenant.id, experiment_data)


# GET /experiments
@experiment_router.get("", response_model=list[ExperimentResponse])
def list_experiments_route(
    tenant: Tenant = CURRENT_TENANT,
    db: Session = DB_DEPENDENCY
):
    """List all experiments for the tenant, newest first."""
    return experiments.list_experiments(db, tenant.id)


# GET /experiments/{experiment_id}
@experiment_router.get("/{experiment_id}", response_model=ExperimentDetailResponse)
def get_experiment_route(
    experiment_id: str,
    tenant: Tenant = CURRENT_TENANT,
    db: Session = DB_DEPENDENCY
):
    """Get experiment details with event and assignment counts."""
    return experiments.get_experiment_detail(db, tenant.id, experiment_id)


# PATCH /experiments/{experiment_id}
@experiment_router.patch("/{experiment_id}", response_model=ExperimentResponse)
def update_experiment_route(
    experiment_id: str,
    update_data: ExperimentUpdate,
    tenant: Tenant = CURRENT_TENANT,
    db: Session = DB_DEPENDENCY
):
    """Update an experiment's status."""
    return experiments.update_experiment(db, tenant.id, experiment_id, update_data)
