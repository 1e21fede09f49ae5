from fastapi import APIRouter, Body, Depends

from workplan.api.deps import (
    Caller, current_user, get_plan_service, get_submission_handler, require_branch_user, require_main_branch,
)
from workplan.logic.planning.service import PlanService
from workplan.logic.reporting.submission import ReportSubmissionHandler

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.post("", status_code=201)
def create_activity(payload: dict = Body(...), service: PlanService = Depends(get_plan_service),
                    caller: Caller = Depends(require_main_branch)):
    result = service.create_activity(payload)
    return {"message": "Activity created successfully", **result}


@router.get("")
def list_activities(service: PlanService = Depends(get_plan_service), caller: Caller = Depends(current_user)):
    return [a.to_dict() for a in service.list_activities()]


@router.post("/reports/submit")
def submit_activity_report(payload: dict = Body(...),
                           handler: ReportSubmissionHandler = Depends(get_submission_handler),
                           caller: Caller = Depends(require_branch_user)):
    result = handler.submit_activity(
        payload.get("reportId", payload.get("report_id")),
        payload.get("actualActivity", payload.get("actual_amount")),
        payload.get("notes"),
        user_id=caller.id,
    )
    return {"message": "Activity report submitted successfully", **result}


@router.get("/reports/mine")
def my_activity_reports(service: PlanService = Depends(get_plan_service),
                        caller: Caller = Depends(require_branch_user)):
    return service.my_activity_reports(caller.id)


@router.get("/reports/plan/{plan_id}")
def plan_activity_reports(plan_id: int, service: PlanService = Depends(get_plan_service),
                          caller: Caller = Depends(require_main_branch)):
    return service.plan_activity_reports(plan_id)


@router.get("/summary/{plan_id}")
def activity_summary(plan_id: int, service: PlanService = Depends(get_plan_service),
                     caller: Caller = Depends(require_main_branch)):
    return service.activity_summary(plan_id)
