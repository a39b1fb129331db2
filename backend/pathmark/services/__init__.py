"""Services for tag resolution, reconciliation and hierarchy maintenance."""
from pathmark.services.tag_hierarchy_service import TagHierarchyService
from pathmark.services.tag_service import TagService

__all__ = ["TagHierarchyService", "TagService"]
