"""Ví dụ: dùng service layer trực tiếp.

Mục tiêu: minh hoạ luồng dữ liệu chấm công -> giờ công theo ngày -> tổng hợp theo đề xuất tuyển dụng.
"""

from src.staffing_hours.staffing_hours.main import create_container


def main():
    container = create_container()

    report = container.recruitment_hours.build_report()
    print(f"{report.total_requests} đề xuất, {report.total_employees} nhân viên, {report.total_hours}")
    for summary in report.summaries:
        print(f"- {summary.request_no}: {summary.total_employees} nhân viên, {summary.total_hours}")

    hours = container.attendance_service.get_employee_hours()
    for employee_id, days in list(hours.items())[:3]:
        for day in days:
            print(employee_id, day.date, day.total_hours, "; ".join(day.warnings))


if __name__ == "__main__":
    main()
