from src.staffing_hours.staffing_hours.recruitment.model import RequestFilters


def test_requests_decode_link_and_form_columns(container, store, seed):
    seed.request(store, "R1", "2025-01-01", "2025-01-31", quantity=3, department="Thu ngân")
    store.seed("recruitment", {"Request No.": "R2", "Status": "Đã đóng", "Department": "Kho", "Quantity": 2})
    store.seed("recruitment", {"Request No.": "", "Status": "Đang tuyển dụng"})

    requests = container.recruitment_service.get_requests()

    assert [r.request_no for r in requests] == ["R1", "R2"]
    first, second = requests
    assert (first.department, first.quantity, first.from_date.isoformat()) == ("Thu ngân", 3, "2025-01-01")
    assert (second.department, second.quantity, second.from_date) == ("Kho", 2, None)


def test_requests_are_filtered_and_cached(container, store, seed):
    seed.request(store, "R1", "2025-01-01", "2025-01-31", department="Bán hàng")
    seed.request(store, "R2", "2025-01-01", "2025-01-31", department="Kho")
    seed.request(store, "R3", "2025-01-01", "2025-01-31", status="Đã đóng")
    service = container.recruitment_service

    open_sales = service.get_requests(RequestFilters(status="Đang tuyển dụng", department="Bán hàng"))
    assert [r.request_no for r in open_sales] == ["R1"]

    calls = len(store.calls)
    service.get_requests(RequestFilters(status="Đang tuyển dụng", department="Bán hàng"))
    assert len(store.calls) == calls


def test_request_lookup_by_number(container, store, seed):
    seed.request(store, "R1", "2025-01-01", "2025-01-10")
    seed.request(store, "R1", "2025-01-11", "2025-01-20")
    service = container.recruitment_service

    assert len(service.get_requests_by_no(" R1 ")) == 2
    assert service.get_request_by_no("R1").to_date.isoformat() == "2025-01-10"
    assert service.get_request_by_no("R9") is None


def test_store_failure_degrades_to_empty(container, store, seed):
    seed.request(store, "R1", "2025-01-01", "2025-01-10")
    seed.hours_summary(store, "NV01", "R1", "2025-01-02", 4)
    store.fail_on.add(("list_all", "*"))

    assert container.recruitment_service.get_requests() == []
    assert container.recruitment_service.get_hours_summary_rows() == []


def test_hours_summary_totals_and_rates(container, store, seed):
    seed.hours_summary(store, "NV01", "R1", "2025-01-02", 3.5, hourly_rate=20000)
    seed.hours_summary(store, "NV01", "R2", "2025-01-03", "4 giờ", hourly_rate=25000)
    seed.hours_summary(store, "NV02", "R1", "2025-01-02", "7 giờ 30 phút")
    store.seed("hours_summary", {"Mã nhân viên": [], "Tổng giờ": 8})
    service = container.recruitment_service

    rows = service.get_hours_summary_rows()

    assert len(rows) == 3
    assert rows[0].request_no == "R1"
    assert service.employee_hours_totals() == {"NV01": 7.5, "NV02": 7.5}
    assert service.hourly_rate_map() == {"NV01": 25000}
