"""Plan catalog endpoints."""
from fastapi import APIRouter, Depends

from textgate.api.deps import get_plan_catalog
from textgate.schemas.plan import PlanLimits, PlanList
from textgate.services.plan_catalog import PlanCatalog

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", response_model=PlanList)
async def list_plans(catalog: PlanCatalog = Depends(get_plan_catalog)) -> PlanList:
    """List every plan with its quota and entitlements, cheapest first."""
    plans = catalog.all()
    return PlanList(items=plans, total=len(plans))


@router.get("/{plan_type}", response_model=PlanLimits)
async def get_plan(plan_type: str, catalog: PlanCatalog = Depends(get_plan_catalog)) -> PlanLimits:
    """
    Get limits for one plan.

    Unknown plan types return the free plan.
    """
    return catalog.get(plan_type)
