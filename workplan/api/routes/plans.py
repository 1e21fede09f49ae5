import logging
from datetime import datetime

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import JSONResponse

from workplan.api.deps import (
    Caller, current_user, get_plan_service, get_renewal_engine, require_main_branch,
)
from workplan.infra.pdf_utils import generate_pdf_for_plan
from workplan.logic.planning.service import PlanService, describe_plan
from workplan.logic.renewal.engine import FAILED, RenewalEngine

router = APIRouter(prefix="/api/monthly-plans", tags=["monthly-plans"])
logger = logging.getLogger(__name__)


@router.get("/current")
def get_current_plan(service: PlanService = Depends(get_plan_service), caller: Caller = Depends(current_user)):
    """Current active plan; created on first access if the scheduler has not run yet."""
    return describe_plan(service.get_current_plan())


@router.put("/current/target")
def update_current_target(payload: dict = Body(...), service: PlanService = Depends(get_plan_service),
                          caller: Caller = Depends(require_main_branch)):
    target = payload.get("targetAmount", payload.get("target_amount"))
    plan = service.update_plan_target(target)
    return {"message": "Monthly plan updated successfully", "plan": plan.to_dict()}


@router.get("/history")
def plan_history(service: PlanService = Depends(get_plan_service), caller: Caller = Depends(current_user)):
    return [p.to_dict() for p in service.list_plans()]


@router.get("/{plan_id}/stats")
def plan_stats(plan_id: int, service: PlanService = Depends(get_plan_service),
               caller: Caller = Depends(current_user)):
    return service.plan_stats(plan_id)


@router.post("/check-renewal")
def check_renewal(engine: RenewalEngine = Depends(get_renewal_engine),
                  caller: Caller = Depends(require_main_branch)):
    """Manual trigger for the same check the scheduler runs hourly."""
    outcome = engine.check_and_renew(datetime.now())
    logger.info("Manual renewal check by user %s: %s", caller.id, outcome)
    if outcome == FAILED:
        return JSONResponse(status_code=503, content={"detail": "Monthly plan renewal check failed"})
    return {"message": "Monthly plan renewal check completed", "outcome": outcome}


@router.get("/{plan_id}/export.pdf")
def export_plan_pdf(plan_id: int, service: PlanService = Depends(get_plan_service),
                    caller: Caller = Depends(require_main_branch)):
    plan = service.get_plan(plan_id)
    stats = service.plan_stats(plan_id)
    reports = service.plan_reports(plan_id)
    pdf_bytes = generate_pdf_for_plan(plan, stats, reports)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=monthly_plan_{plan.year}_M{plan.month:02d}.pdf"
        },
    )
