"""
Demo plan used when the plan library is empty.
"""

import datetime as dt

from .plan import Holiday, Phase, PhaseType, ProjectPlan, SubProject

DEMO_PLAN_ID = "demo-plan-001"


def build_demo_plan() -> ProjectPlan:
    """Build the bundled e-commerce demo plan."""
    return ProjectPlan(
        id=DEMO_PLAN_ID,
        name="Demo: E-commerce Mobile App 2025",
        description=(
            "A sample project plan illustrating the development of a shopping "
            "application, including design, API integration, and testing."
        ),
        created_at=dt.datetime.now(),
        sub_projects=(
            SubProject(id="sp-1", name="UX/UI Design"),
            SubProject(id="sp-2", name="Backend API"),
            SubProject(id="sp-3", name="Mobile Frontend"),
        ),
        phases=(
            Phase(id="p-1", name="Wireframing", start_date=dt.date(2025, 11, 3),
                  end_date=dt.date(2025, 11, 7), type=PhaseType.CONCEPTION, sub_project_id="sp-1"),
            Phase(id="p-2", name="High Fidelity Prototypes", start_date=dt.date(2025, 11, 10),
                  end_date=dt.date(2025, 11, 14), type=PhaseType.CONCEPTION, sub_project_id="sp-1"),
            Phase(id="p-3", name="Database Setup", start_date=dt.date(2025, 11, 5),
                  end_date=dt.date(2025, 11, 12), type=PhaseType.DEVELOPMENT, sub_project_id="sp-2"),
            Phase(id="p-4", name="Auth & User API", start_date=dt.date(2025, 11, 13),
                  end_date=dt.date(2025, 11, 21), type=PhaseType.DEVELOPMENT, sub_project_id="sp-2"),
            Phase(id="p-5", name="Product Catalog API", start_date=dt.date(2025, 11, 24),
                  end_date=dt.date(2025, 12, 5), type=PhaseType.DEVELOPMENT, sub_project_id="sp-2"),
            Phase(id="p-6", name="App Shell & Navigation", start_date=dt.date(2025, 11, 17),
                  end_date=dt.date(2025, 11, 21), type=PhaseType.DEVELOPMENT, sub_project_id="sp-3"),
            Phase(id="p-7", name="Product Screens", start_date=dt.date(2025, 11, 24),
                  end_date=dt.date(2025, 12, 12), type=PhaseType.DEVELOPMENT, sub_project_id="sp-3"),
            Phase(id="p-8", name="Integration Testing", start_date=dt.date(2025, 12, 15),
                  end_date=dt.date(2025, 12, 19), type=PhaseType.TESTS, sub_project_id="sp-2"),
            Phase(id="p-9", name="Beta Release", start_date=dt.date(2025, 12, 22),
                  end_date=dt.date(2025, 12, 22), type=PhaseType.PUSH_TO_PROD),
        ),
        holidays=(
            Holiday(id="h-1", name="Christmas Day", date=dt.date(2025, 12, 25)),
            Holiday(id="h-2", name="Boxing Day", date=dt.date(2025, 12, 26)),
        ),
    )
