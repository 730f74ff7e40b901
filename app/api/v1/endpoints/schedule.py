"""Company opening hours endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.security import get_current_user
from app.db.session import get_db
from app.models import User
from app.schemas.schedule import (
    CompanyOpenStatus,
    CompanyScheduleCreate,
    CompanyScheduleRead,
    CompanyScheduleUpdate,
    OpenStatusResponse,
    ScheduleHourCreate,
    ScheduleHourRead,
    ScheduleHourUpdate,
    ScheduleStatistics,
)
from app.services import schedule_service
from app.services.company_service import get_company
from app.services.security_guards import ensure_role
from app.utils.enums import RoleType
from app.utils.time import utc_now

router = APIRouter()

ADMIN_ROLES: set[RoleType] = {
    RoleType.SUPER_ADMIN,
    RoleType.ORGANIZATION_ADMIN,
    RoleType.PLACE_ADMIN,
    RoleType.COMPANY_ADMIN,
}


@router.get("/companies/{company_id}/schedule", response_model=CompanyScheduleRead)
def get_company_schedule(company_id: int, db: Session = Depends(get_db)) -> CompanyScheduleRead:
    get_company(db, company_id)
    schedule = schedule_service.get_schedule_by_company(db, company_id)
    if schedule is None:
        raise NotFoundError("Schedule not found for this company")
    return CompanyScheduleRead.model_validate(schedule)


@router.put("/companies/{company_id}/schedule", response_model=CompanyScheduleRead)
def upsert_company_schedule(
    company_id: int,
    payload: CompanyScheduleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CompanyScheduleRead:
    schedule = schedule_service.upsert_schedule(db, current_user, company_id, payload, now=utc_now())
    return CompanyScheduleRead.model_validate(schedule)


@router.delete("/companies/{company_id}/schedule", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_schedule(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    schedule = schedule_service.get_schedule_by_company(db, company_id)
    if schedule is None:
        raise NotFoundError("Schedule not found for this company")
    schedule_service.remove_schedule(db, current_user, schedule.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/schedule/{schedule_id}", response_model=CompanyScheduleRead)
def update_schedule(
    schedule_id: int,
    payload: CompanyScheduleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CompanyScheduleRead:
    schedule = schedule_service.update_schedule(db, current_user, schedule_id, payload, now=utc_now())
    return CompanyScheduleRead.model_validate(schedule)


@router.post(
    "/companies/{company_id}/schedule/hours",
    response_model=ScheduleHourRead,
    status_code=status.HTTP_201_CREATED,
)
def add_schedule_hour(
    company_id: int,
    payload: ScheduleHourCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScheduleHourRead:
    hour = schedule_service.add_hour(db, current_user, company_id, payload, now=utc_now())
    return ScheduleHourRead.model_validate(hour)


@router.patch("/schedule/hours/{hour_id}", response_model=ScheduleHourRead)
def update_schedule_hour(
    hour_id: int,
    payload: ScheduleHourUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScheduleHourRead:
    hour = schedule_service.update_hour(db, current_user, hour_id, payload, now=utc_now())
    return ScheduleHourRead.model_validate(hour)


@router.delete("/schedule/hours/{hour_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule_hour(
    hour_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    schedule_service.remove_hour(db, current_user, hour_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/companies/{company_id}/schedule/status", response_model=OpenStatusResponse)
def get_open_status(company_id: int, db: Session = Depends(get_db)) -> OpenStatusResponse:
    status_result = schedule_service.status_for_company(db, company_id, utc_now())
    return OpenStatusResponse.model_validate(status_result)


@router.get("/schedule/open-now", response_model=list[CompanyOpenStatus])
def list_companies_open_now(
    place_id: int | None = Query(default=None),
    open_only: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> list[CompanyOpenStatus]:
    results = schedule_service.companies_open_now(db, utc_now(), place_id=place_id, open_only=open_only)
    return [CompanyOpenStatus(**item) for item in results]


@router.get("/schedule/mine", response_model=list[CompanyScheduleRead])
def list_my_schedules(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CompanyScheduleRead]:
    ensure_role(current_user, ADMIN_ROLES)
    schedules = schedule_service.list_schedules_for_user(db, current_user)
    return [CompanyScheduleRead.model_validate(schedule) for schedule in schedules]


@router.get("/schedule/statistics", response_model=ScheduleStatistics)
def get_schedule_statistics(
    place_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScheduleStatistics:
    ensure_role(current_user, ADMIN_ROLES)
    return ScheduleStatistics(**schedule_service.schedule_statistics(db, utc_now(), place_id=place_id))
