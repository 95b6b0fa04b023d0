from sqlalchemy.orm import Session
from sqlalchemy import func
from fastapi import HTTPException, status
from data.database import Experiment, Event, UserAssignment, utc_now
from models.experiments import ExperimentCreate, ExperimentUpdate, ExperimentCounts
import logging

logger = logging.getLogger(__name__)

# --- Experiment Creation ---
def create_experiment(db: Session, tenant_id: str, experiment_data: ExperimentCreate) -> Experiment:
    """Creates a new experiment with its variant configuration for the tenant."""
    db_experiment = Experiment(
        tenant_id=tenant_id,
        name=experiment_data.name,
        description=experiment_data.description,
        variants=[v.model_dump(by_alias=True) for v in experiment_data.variants],
        status=experiment_data.status,
        start_date=experiment_data.start_date,
        end_date=experiment_data.end_date,
    )
    db.add(db_experiment)
    db.commit()
    db.refresh(db_experiment)
    logger.info("create new experiment %s success with experiment id: %s", experiment_data.name, db_experiment.id)

    return db_experiment

def list_experiments(db: Session, tenant_id: str) -> list[Experiment]:
    """All experiments of the tenant, newest first."""
    return (
        db.query(Experiment)
        .filter(Experiment.tenant_id == tenant_id)
        .order_by(Experiment.created_at.desc())
        .all()
    )

def find_experiment(db: Session, tenant_id: str, experiment_id: str) -> Experiment | None:
    return db.query(Experiment).filter(
        Experiment.id == experiment_id,
        Experiment.tenant_id == tenant_id
    ).one_or_none()

def get_experiment_or_404(db: Session, tenant_id: str, experiment_id: str) -> Experiment:
    experiment = find_experiment(db, tenant_id, experiment_id)
    if experiment is None:
        logger.info("Experiment %s not found for tenant %s", experiment_id, tenant_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Experiment with ID {experiment_id} not found"
        )
    return experiment

def count_related(db: Session, experiment_id: str) -> ExperimentCounts:
    """Number of events and user assignments recorded against an experiment."""
    events = db.query(func.count(Event.id)).filter(Event.experiment_id == experiment_id).scalar()
    assignments = db.query(func.count(UserAssignment.id)).filter(
        UserAssignment.experiment_id == experiment_id
    ).scalar()
    return ExperimentCounts(events=events or 0, user_assignments=assignments or 0)

def get_experiment_detail(db: Session, tenant_id: str, experiment_id: str) -> dict:
    """Experiment columns plus a ``counts`` entry, shaped for ExperimentDetailResponse."""
    experiment = get_experiment_or_404(db, tenant_id, experiment_id)
    detail = {column.name: getattr(experiment, column.name) for column in Experiment.__table__.columns}
    detail["counts"] = count_related(db, experiment.id)
    return detail

def update_experiment(db: Session, tenant_id: str, experiment_id: str, update_data: ExperimentUpdate) -> Experiment:
    """Applies the provided fields (currently only status) to an existing experiment."""
    experiment = get_experiment_or_404(db, tenant_id, experiment_id)

    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
    for name, value in changes.items():
        setattr(experiment, name, value)
    # onupdate only fires when a column actually changes
    experiment.updated_at = utc_now()

    db.commit()
    db.refresh(experiment)
    logger.info("experiment %s updated: %s", experiment_id, changes)
    return experiment
