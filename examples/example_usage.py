"""Ví dụ: dùng service layer (không qua Flask).

Controllers chỉ là lớp mỏng; quy tắc điểm danh nằm ở Services.
"""

import importlib
from pathlib import Path

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        backend=settings.STORAGE_BACKEND,
        db_config=settings.DB_CONFIG,
        workbook_path=str(Path(__file__).resolve().parents[1] / settings.WORKBOOK_PATH),
    )
    print(container.roster_service.get_stats("STU001").to_dict())
    print(container.attendance_service.verify("STU001").to_dict())


if __name__ == "__main__":
    main()
