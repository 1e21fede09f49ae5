from fastapi import APIRouter, Body, Depends

from workplan.api.deps import (
    Caller, get_plan_service, get_submission_handler, require_branch_user, require_main_branch,
)
from workplan.logic.planning.service import PlanService
from workplan.logic.reporting.submission import ReportSubmissionHandler

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post("/submit")
def submit_report(payload: dict = Body(...), handler: ReportSubmissionHandler = Depends(get_submission_handler),
                  caller: Caller = Depends(require_branch_user)):
    result = handler.submit(
        payload.get("reportId", payload.get("report_id")),
        payload.get("achievedAmount", payload.get("achieved_amount")),
        payload.get("notes"),
        user_id=caller.id,
    )
    return {"message": "Report submitted successfully", **result}


@router.get("/my-reports")
def my_reports(service: PlanService = Depends(get_plan_service), caller: Caller = Depends(require_branch_user)):
    return service.my_reports(caller.id)


@router.get("/plan/{plan_id}")
def plan_reports(plan_id: int, service: PlanService = Depends(get_plan_service),
                 caller: Caller = Depends(require_main_branch)):
    return service.plan_reports(plan_id)


@router.get("/comparison/{plan_id}")
def branch_comparison(plan_id: int, service: PlanService = Depends(get_plan_service),
                      caller: Caller = Depends(require_main_branch)):
    return service.branch_comparison(plan_id)
