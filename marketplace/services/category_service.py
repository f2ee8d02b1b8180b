import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.errors import DuplicateError, NotFoundError, StorageError, ValidationError
from marketplace.models.category import Category
from marketplace.services.identifiers import parse_id

NAME_MAX_LENGTH = 100


class CategoryService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_active(self) -> list[Category]:
        query = select(Category).where(Category.is_active.is_(True)).order_by(Category.name.asc())
        try:
            return list(self.db.scalars(query))
        except SQLAlchemyError as exc:
            raise StorageError("Error fetching categories", str(exc)) from exc

    def get_by_id(self, category_id: str | uuid.UUID) -> Category:
        key = parse_id(category_id, "Category")
        try:
            category = self.db.get(Category, key)
        except SQLAlchemyError as exc:
            raise StorageError("Error fetching category", str(exc)) from exc
        if category is None:
            raise NotFoundError("Category")
        return category

    def create(
        self,
        name: str,
        *,
        description: str | None = None,
        icon: str | None = None,
        parent_id: uuid.UUID | None = None,
        is_active: bool = True,
    ) -> Category:
        name = (name or "").strip()
        violations = []
        if not name:
            violations.append("Category name is required")
        elif len(name) > NAME_MAX_LENGTH:
            violations.append(f"Category name cannot exceed {NAME_MAX_LENGTH} characters")
        if violations:
            raise ValidationError(violations)

        category = Category(
            name=name,
            description=description,
            icon=icon,
            parent_id=parent_id,
            is_active=is_active,
        )
        self.db.add(category)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateError("Category", f"name={name}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Error saving category", str(exc)) from exc
        self.db.refresh(category)
        return category

    def deactivate(self, category_id: str | uuid.UUID) -> Category:
        category = self.get_by_id(category_id)
        if not category.is_active:
            return category

        category.is_active = False
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Error saving category", str(exc)) from exc
        self.db.refresh(category)
        return category
