from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace.models.category import Category
from marketplace.observability import log_event
from marketplace.services.category_service import CategoryService

DEMO_CATEGORIES = (
    ("Electronics", "Phones, laptops and accessories"),
    ("Fashion", "Clothing, shoes and bags"),
    ("Home & Garden", "Furniture, decor and tools"),
    ("Collectibles", "Coins, cards and memorabilia"),
    ("Sports", "Equipment and outdoor gear"),
)


def seed_categories(db: Session) -> int:
    """Insert the demo categories once; returns how many were created."""
    if db.scalar(select(Category.id).limit(1)) is not None:
        return 0

    service = CategoryService(db)
    for name, description in DEMO_CATEGORIES:
        service.create(name, description=description)
    log_event(f"seeded_categories:{len(DEMO_CATEGORIES)}")
    return len(DEMO_CATEGORIES)
