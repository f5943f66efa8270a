# Import all models here so metadata.create_all sees every table
from app.DB.base import Base

from app.features.projects.models import Project

__all__ = [
    "Base",
    "Project",
]
