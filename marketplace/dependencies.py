from fastapi import Depends
from sqlalchemy.orm import Session

from marketplace.db.session import get_db
from marketplace.services.category_service import CategoryService
from marketplace.services.returns_service import ReturnRequestService
from marketplace.services.shipping_service import ShippingLifecycleManager


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_shipping_manager(db: Session = Depends(get_db)) -> ShippingLifecycleManager:
    return ShippingLifecycleManager(db)


def get_return_service(db: Session = Depends(get_db)) -> ReturnRequestService:
    return ReturnRequestService(db)
