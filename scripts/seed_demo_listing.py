"""
Seed the database with a demo user, a demo flip listing and its saved analysis.

Usage:
    python scripts/seed_demo_listing.py
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flipdesk.api.analyses import seed_deal_inputs
from flipdesk.auth.password import hash_password
from flipdesk.calculations.analysis import recompute
from flipdesk.db.database import SessionLocal, init_db
from flipdesk.db.models import FlipAnalysis, Property, User

DEMO_EMAIL = "demo@flipdesk.local"
DEMO_PASSWORD = "demo-flipper-123"
DEMO_TITLE = "1412 Palmetto St"


def main():
    init_db()
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.email == DEMO_EMAIL).first()
        if not user:
            user = User(
                email=DEMO_EMAIL,
                hashed_password=hash_password(DEMO_PASSWORD),
                full_name="Demo Flipper",
                phone_number="555-0142",
            )
            db.add(user)
            db.flush()
            print(f"Created demo user: {user.email} / {DEMO_PASSWORD}")

        existing = db.query(Property).filter(
            Property.user_id == user.id,
            Property.title == DEMO_TITLE,
        ).first()
        if existing:
            print(f"Listing '{DEMO_TITLE}' already exists (ID: {existing.id})")
            return

        prop = Property(
            user_id=user.id,
            title=DEMO_TITLE,
            description="1950s block ranch. Roof is 4 years old; kitchen, baths and flooring need a full redo.",
            address="1412 Palmetto St, Clearwater, FL 33755",
            property_type="single_family",
            asking_price=215000,
            estimated_after_repair_value=335000,
            estimated_closing_costs=6500,
            estimated_as_is_value=230000,
            rehab_cost=62000,
            rehab_duration_months=4,
            bedrooms=3,
            bathrooms=2,
            interior_sqft=1380,
            lot_sqft=7200,
            seller_email=DEMO_EMAIL,
            seller_phone="555-0142",
        )
        db.add(prop)
        db.flush()
        print(f"Created listing: {prop.title} (ID: {prop.id})")

        prop.flip_analysis = FlipAnalysis(
            property_id=prop.id,
            purchase_price=205000,
            estimated_purchase_costs=6500,
            estimated_rehab_costs=62000,
            after_repair_value=335000,
            after_repair_sqft=1380,
            tax_rate=0.25,
        )
        db.commit()
        db.refresh(prop)

        result = recompute(seed_deal_inputs(prop))
        print("\nSaved analysis (cash purchase, 6 months held):")
        print(f"  Total investment: ${result.total_investment:,.0f}")
        print(f"  Total profit:     ${result.total_profit:,.0f}")
        print(f"  Total ROI:        {result.total_roi:.1%}")
        print(f"  Annualized ROI:   {result.annualized_roi:.1%}")
        print(f"  70% rule:         {'pass' if result.seventy_percent_rule.passes else 'fail'}")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
