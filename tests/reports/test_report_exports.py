import io

import pandas as pd

from src.staffing_hours.staffing_hours.reports.service import ReportData, ReportService


def _seed_recruitment(store, seed):
    seed.employee(store, "NV01", "Nguyễn Văn A")
    seed.employee(store, "NV02", "Trần Thị B")
    seed.request(store, "R1", "2025-01-01", "2025-01-31", department="Bán hàng")
    seed.work_history(store, "NV01", "R1", "2025-01-01", "2025-01-15")
    seed.work_history(store, "NV02", "R1", "2025-01-10", "2025-01-31")
    seed.hours_summary(store, "NV01", "R1", "2025-01-02", 3.5)
    seed.hours_summary(store, "NV02", "R1", "2025-01-12", 4.25)


def test_recruitment_report_rows_and_summary(container, store, seed):
    _seed_recruitment(store, seed)

    report = container.report_service.build_recruitment_report()

    assert list(report.rows[0]) == [
        "Mã đề xuất", "Phòng ban", "Vị trí", "Từ ngày", "Đến ngày", "Mã NV", "Họ Tên", "Tổng giờ", "Số giờ",
    ]
    assert [(r["Mã NV"], r["Số giờ"]) for r in report.rows] == [("NV01", 3.5), ("NV02", 4.25)]
    assert report.rows[0]["Từ ngày"] == "01/01/2025"
    assert report.summary == [
        {
            "Mã đề xuất": "R1",
            "Phòng ban": "Bán hàng",
            "Trạng thái": "Đang tuyển dụng",
            "Số nhân viên": 2,
            "Tổng giờ": "7 giờ 45 phút",
            "Số giờ": 7.75,
        }
    ]


def test_employee_hours_report_summary_is_sorted_by_hours(container, store, seed):
    seed.employee(store, "NV01", "Nguyễn Văn A")
    seed.employee(store, "NV02", "Trần Thị B")
    seed.punch(store, "NV01", "Checkin", "2025-01-06T08:00:00")
    seed.punch(store, "NV01", "Checkout", "2025-01-06T10:00:00")
    seed.punch(store, "NV02", "Checkin", "2025-01-06T08:00:00")
    seed.punch(store, "NV02", "Checkout", "2025-01-06T17:00:00")
    seed.punch(store, "NV02", "Checkin", "2025-01-07T08:00:00")

    report = container.report_service.build_employee_hours_report()

    assert [r["Ngày"] for r in report.rows] == ["06/01/2025", "07/01/2025", "06/01/2025"]
    assert report.rows[1]["Cảnh báo"] == "Thiếu chấm công ra (Checkout)"
    assert report.summary == [
        {"Mã NV": "NV02", "Họ Tên": "Trần Thị B", "Số ngày": 2, "Tổng giờ": "9 giờ", "Số giờ": 9},
        {"Mã NV": "NV01", "Họ Tên": "Nguyễn Văn A", "Số ngày": 1, "Tổng giờ": "2 giờ", "Số giờ": 2},
    ]


def test_export_excel_writes_both_sheets():
    report = ReportData(
        rows=[{"Mã NV": "NV01", "Số giờ": 7.5}],
        summary=[{"Mã NV": "NV01", "Số ngày": 1}],
    )

    content = ReportService.export_excel(report)

    assert content[:2] == b"PK"
    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None)
    assert list(sheets) == ["ChiTiet", "TongHop"]
    assert list(sheets["ChiTiet"].columns) == ["Mã NV", "Số giờ"]
    assert sheets["ChiTiet"].iloc[0]["Số giờ"] == 7.5
