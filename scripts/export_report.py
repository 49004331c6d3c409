"""Export báo cáo giờ công ra file Excel.

Note: Mặc định xuất báo cáo theo đề xuất tuyển dụng; dùng tham số `employees`
để xuất báo cáo giờ công theo nhân viên.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.staffing_hours.staffing_hours.main import create_container


def main() -> None:
    kind = sys.argv[1] if len(sys.argv) > 1 else "recruitment"
    container = create_container()
    reports = container.report_service

    if kind == "employees":
        report = reports.build_employee_hours_report()
    elif kind == "recruitment":
        report = reports.build_recruitment_report()
    else:
        raise SystemExit(f"Loại báo cáo không hợp lệ: {kind} (recruitment | employees)")

    out_dir = REPO_ROOT / "reports"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"bao_cao_{kind}_{ts}.xlsx"
    out_file.write_bytes(reports.export_excel(report))
    print(f"OK: Report created: {out_file} ({len(report.rows)} rows)")


if __name__ == "__main__":
    main()
