"""Domain layer for paytrack application."""

_SERVICES = {
    "BackupService": "paytrack.domain.backup",
    "BudgetService": "paytrack.domain.budget",
    "EmploymentService": "paytrack.domain.employment",
    "ImportExecutor": "paytrack.domain.import_executor",
    "SalaryRecordService": "paytrack.domain.salary_record",
    "SummaryService": "paytrack.domain.summary",
    "TemplateService": "paytrack.domain.template",
    "WorkbookExportService": "paytrack.domain.workbook_export",
    "WorkbookImportService": "paytrack.domain.workbook_import",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities;
# load them on first access to avoid circular imports
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
