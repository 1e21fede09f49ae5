"""FastAPI dependencies: repository wiring and caller identity.

Authentication happens upstream; the gateway forwards the verified user id
and role as ``X-User-Id`` / ``X-User-Role`` headers.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException

from workplan.infra.Plan_Repository import PlanRepository
from workplan.infra.database import build_engine
from workplan.logic.planning.service import PlanService
from workplan.logic.renewal.engine import RenewalEngine
from workplan.logic.reporting.submission import ReportSubmissionHandler
from workplan.utilities.config import DATABASE_ECHO, DATABASE_URL
from workplan.utilities.constants import ROLE_ADMIN, ROLE_BRANCH_USER, ROLE_MAIN_BRANCH


class Caller:
    def __init__(self, user_id: int, role: str):
        self.id = user_id
        self.role = role


@lru_cache(maxsize=1)
def get_repository() -> PlanRepository:
    return PlanRepository(build_engine(DATABASE_URL, echo=DATABASE_ECHO))


def get_renewal_engine(repo: PlanRepository = Depends(get_repository)) -> RenewalEngine:
    return RenewalEngine(repo)


def get_plan_service(engine: RenewalEngine = Depends(get_renewal_engine)) -> PlanService:
    return PlanService(engine.repository, engine)


def get_submission_handler(repo: PlanRepository = Depends(get_repository)) -> ReportSubmissionHandler:
    return ReportSubmissionHandler(repo)


def current_user(x_user_id: Optional[int] = Header(default=None),
                 x_user_role: Optional[str] = Header(default=None)) -> Caller:
    if x_user_id is None or not x_user_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    return Caller(x_user_id, x_user_role)


def require_role(*roles: str):
    def _check(caller: Caller = Depends(current_user)) -> Caller:
        if caller.role not in roles:
            raise HTTPException(status_code=403, detail=f"Access denied. One of these roles required: {', '.join(roles)}")
        return caller
    return _check


require_main_branch = require_role(ROLE_MAIN_BRANCH, ROLE_ADMIN)
require_branch_user = require_role(ROLE_BRANCH_USER)
