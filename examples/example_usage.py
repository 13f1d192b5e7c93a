"""Example: calling the service layer directly (no Flask).

Controllers are thin; the deadline rules live in the services.
"""

import importlib

from config import get_settings_module

from src.worktime.worktime.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    quote = container.sla_service.deadline_for_developer("dev-1", sla_hours=8)
    print(quote.to_dict())

    flagged = container.task_deadline_service.check_late_acknowledgements()
    print(f"Flagged {len(flagged)} late acknowledgements")


if __name__ == "__main__":
    main()
