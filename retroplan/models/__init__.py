"""
Data models for Retroplan.

Import models explicitly from their modules:
    from retroplan.models.plan import Phase, PhaseType, Holiday, SubProject, ProjectPlan
    from retroplan.models.files import PlansFile, ConfigFile
"""

from .plan import Holiday, Phase, PhaseType, ProjectPlan, SubProject

__all__ = ["Holiday", "Phase", "PhaseType", "ProjectPlan", "SubProject"]
