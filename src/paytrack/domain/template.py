"""Organization template domain service."""

import logging
from typing import Optional, Sequence

from paytrack.database.base import Database
from paytrack.domain.classifier import DEFAULT_REGISTRY
from paytrack.domain.entities import ColumnKind, OrganizationTemplate
from paytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_in_template,
    duplicate_template,
    template_not_found,
)

logger = logging.getLogger(__name__)


def _clean_categories(categories: Sequence[str]) -> list[str]:
    """Trim names, drop blanks and repeats, keep order."""
    return list(dict.fromkeys(c.strip() for c in categories if c.strip()))


def _check_kind(kind: ColumnKind) -> None:
    if kind not in (ColumnKind.EARNING, ColumnKind.DEDUCTION):
        raise ValidationError("Category kind must be earning or deduction")


class TemplateService:
    """Service for managing per-organization category templates."""

    def __init__(self, db: Database):
        """Initialize template service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_templates(self, user_id: str) -> list[OrganizationTemplate]:
        """List a user's templates, by name."""
        return self.db.list_templates(user_id)

    def get_template(self, user_id: str, name: str) -> Optional[OrganizationTemplate]:
        """Get a template by exact organization name, or None."""
        return self.db.get_template_by_name(user_id, name)

    def _require(self, user_id: str, name: str) -> OrganizationTemplate:
        template = self.get_template(user_id, name)
        if template is None:
            raise NotFoundError(template_not_found(name))
        return template

    def create_template(
        self,
        user_id: str,
        name: str,
        earning_categories: Sequence[str] = (),
        deduction_categories: Sequence[str] = (),
    ) -> int:
        """Create a template.

        Args:
            user_id: Owner of the template
            name: Organization name
            earning_categories: Earning category names, in display order
            deduction_categories: Deduction category names, in display order

        Returns:
            Template ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the user already has a template with this name
        """
        name = name.strip()
        if not name:
            raise ValidationError("Template name cannot be empty")
        if self.db.get_template_by_name(user_id, name) is not None:
            raise ConflictError(duplicate_template(name))

        template_id = self.db.create_template(user_id, name)
        self.db.replace_template_categories(
            template_id,
            _clean_categories(earning_categories),
            _clean_categories(deduction_categories),
        )
        logger.info(f"Created template '{name}'")
        return template_id

    def set_categories(
        self,
        user_id: str,
        name: str,
        earning_categories: Sequence[str],
        deduction_categories: Sequence[str],
    ) -> None:
        """Replace both category lists of a template.

        Raises:
            NotFoundError: If the template doesn't exist
        """
        template = self._require(user_id, name)
        self.db.replace_template_categories(
            template.id,
            _clean_categories(earning_categories),
            _clean_categories(deduction_categories),
        )

    def delete_template(self, user_id: str, name: str) -> None:
        """Delete a template. Salary records are left untouched.

        Raises:
            NotFoundError: If the template doesn't exist
        """
        template = self._require(user_id, name)
        self.db.delete_template(template.id)
        logger.info(f"Deleted template '{name}'")

    def init_default_templates(self, user_id: str) -> list[str]:
        """Create templates for the built-in organizations the user doesn't have yet.

        Returns:
            Names of the templates created
        """
        created = []
        for name in DEFAULT_REGISTRY.names():
            if self.db.get_template_by_name(user_id, name) is not None:
                continue
            known = DEFAULT_REGISTRY.get(name)
            self.create_template(user_id, name, known.earnings, known.deductions)
            created.append(name)
        return created

    def move_category(self, user_id: str, name: str, category: str, from_kind: ColumnKind) -> int:
        """Move a category between the earning and deduction lists.

        The category moves to the end of the other list of the template,
        and every salary record line item with this category and the
        template's organization moves with it. Record totals are left as
        they are.

        Args:
            user_id: Owner of the template
            name: Template (organization) name
            category: Category to move
            from_kind: List the category is currently in

        Returns:
            Number of salary record line items moved

        Raises:
            NotFoundError: If the template doesn't exist
            ValidationError: If the category isn't in the from_kind list
        """
        _check_kind(from_kind)
        template = self._require(user_id, name)
        earnings = list(template.earning_categories)
        deductions = list(template.deduction_categories)
        source, target = (earnings, deductions) if from_kind is ColumnKind.EARNING else (deductions, earnings)

        if category not in source:
            raise ValidationError(category_not_in_template(category, from_kind.value, name))

        moved = self.db.move_line_items(
            user_id, template.name, category, to_deductions=from_kind is ColumnKind.EARNING
        )

        source.remove(category)
        if category not in target:
            target.append(category)
        self.db.replace_template_categories(template.id, earnings, deductions)

        logger.info(f"Moved '{category}' out of {from_kind.value}s for '{name}' ({moved} line items)")
        return moved

    def rename_category(
        self, user_id: str, name: str, kind: ColumnKind, old_name: str, new_name: str
    ) -> int:
        """Rename a category in a template and in that organization's salary records.

        Returns:
            Number of salary record line items renamed

        Raises:
            NotFoundError: If the template doesn't exist
            ValidationError: If the category isn't in the template or the new
                name is empty or already used
        """
        _check_kind(kind)
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Category name cannot be empty")

        template = self._require(user_id, name)
        earnings = list(template.earning_categories)
        deductions = list(template.deduction_categories)
        categories = earnings if kind is ColumnKind.EARNING else deductions

        if old_name not in categories:
            raise ValidationError(category_not_in_template(old_name, kind.value, name))
        if new_name != old_name and new_name in categories:
            raise ValidationError(f"'{new_name}' is already a {kind.value} category of template '{name}'")

        renamed = self.db.rename_line_items(
            user_id, template.name, old_name, new_name, deductions=kind is ColumnKind.DEDUCTION
        )
        categories[categories.index(old_name)] = new_name
        self.db.replace_template_categories(template.id, earnings, deductions)
        return renamed

    def reorder_category(
        self, user_id: str, name: str, kind: ColumnKind, category: str, offset: int
    ) -> None:
        """Shift a category up (negative offset) or down within its list.

        Positions past either end are clamped.

        Raises:
            NotFoundError: If the template doesn't exist
            ValidationError: If the category isn't in the list
        """
        _check_kind(kind)
        template = self._require(user_id, name)
        earnings = list(template.earning_categories)
        deductions = list(template.deduction_categories)
        categories = earnings if kind is ColumnKind.EARNING else deductions

        if category not in categories:
            raise ValidationError(category_not_in_template(category, kind.value, name))

        index = categories.index(category)
        new_index = min(max(index + offset, 0), len(categories) - 1)
        categories.insert(new_index, categories.pop(index))
        self.db.replace_template_categories(template.id, earnings, deductions)
