"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the engine lives in the services.
"""

import importlib
from datetime import date

from attendance_engine.config import get_settings_module
from attendance_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    month = date.today().replace(day=1)
    table = container.report_service.payroll_table(month)
    for row in table.rows:
        print(f"{row['name']:<20} earned={row['earned_salary']:>8} budget={row['monthly_salary']:>10}")
    print(container.report_service.kpi_tiles(month))


if __name__ == "__main__":
    main()
