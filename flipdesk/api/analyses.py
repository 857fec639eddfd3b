"""
Saved flip analysis API endpoints.

Only the acquisition subset of the inputs is persisted (price, closing
costs, rehab, ARV, sqft, tax rate). Results are always recomputed on load.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from flipdesk.api.calculations import DealInputsSchema
from flipdesk.api.properties import get_owned_property, get_property_or_404
from flipdesk.auth.dependencies import get_current_user
from flipdesk.calculations.analysis import DealInputs, recompute
from flipdesk.db.database import get_db
from flipdesk.db.models import FlipAnalysis, Property, User

logger = logging.getLogger(__name__)
router = APIRouter()


class AnalysisResponse(BaseModel):
    """Seeded inputs and the analysis computed from them."""

    property_id: str
    saved: bool
    inputs: DealInputsSchema
    result: dict
    updated_at: Optional[str] = None


def seed_deal_inputs(prop: Property) -> DealInputs:
    """
    Initial inputs for a property's analysis.

    A saved analysis wins; otherwise the listing's own numbers are used.
    The rehab duration always comes from the listing.
    """
    saved = prop.flip_analysis
    if saved is not None:
        return DealInputs.from_saved_analysis(
            purchase_price=saved.purchase_price,
            closing_costs=saved.estimated_purchase_costs,
            rehab_cost=saved.estimated_rehab_costs,
            after_repair_value=saved.after_repair_value,
            interior_sqft=saved.after_repair_sqft,
            tax_rate=saved.tax_rate,
            rehab_duration_months=prop.rehab_duration_months,
        )

    return DealInputs.from_saved_analysis(
        purchase_price=prop.asking_price,
        closing_costs=prop.estimated_closing_costs,
        rehab_cost=prop.rehab_cost,
        after_repair_value=prop.estimated_after_repair_value,
        interior_sqft=prop.interior_sqft,
        tax_rate=None,
        rehab_duration_months=prop.rehab_duration_months,
    )


def build_response(prop: Property, inputs: DealInputs) -> AnalysisResponse:
    saved = prop.flip_analysis
    return AnalysisResponse(
        property_id=prop.id,
        saved=saved is not None,
        inputs=DealInputsSchema.from_deal_inputs(inputs),
        result=recompute(inputs).to_dict(),
        updated_at=saved.updated_at.isoformat() if saved and saved.updated_at else None,
    )


@router.get("/properties/{property_id}/analysis", response_model=AnalysisResponse)
async def get_property_analysis(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Load a property's analysis, seeded from the saved record or the listing."""
    prop = get_property_or_404(property_id, db)
    return build_response(prop, seed_deal_inputs(prop))


@router.put("/properties/{property_id}/analysis", response_model=AnalysisResponse)
async def save_property_analysis(
    property_id: str,
    body: DealInputsSchema,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Save the analysis inputs for a property (owner only) and recompute."""
    prop = get_owned_property(property_id, current_user, db)

    inputs = body.to_deal_inputs()
    if prop.rehab_duration_months:
        inputs = inputs.with_changes(rehab_duration_months=prop.rehab_duration_months)

    subset = inputs.to_saved_analysis()
    row = {
        "purchase_price": subset["purchase_price"],
        "estimated_purchase_costs": subset["closing_costs"],
        "estimated_rehab_costs": subset["rehab_cost"],
        "after_repair_value": subset["after_repair_value"],
        "after_repair_sqft": subset["interior_sqft"],
        "tax_rate": subset["tax_rate"],
    }

    saved = prop.flip_analysis
    if saved is None:
        prop.flip_analysis = FlipAnalysis(property_id=prop.id, **row)
    else:
        for field, value in row.items():
            setattr(saved, field, value)

    db.commit()
    db.refresh(prop)
    logger.info(f"Saved flip analysis for property {prop.id}")

    return build_response(prop, inputs)
