from datetime import date

from conftest import add_expense


def test_create_expense(auth_client):
    resp = auth_client.post("/api/expenses", json={
        "description": "Weekly shop", "amount": 54.3, "category": "Groceries", "date": "2024-05-02",
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Expense added successfully"
    expense = body["data"]["expense"]
    assert expense["category"] == "groceries"
    assert expense["date"] == "2024-05-02"
    assert expense["formattedAmount"] == "$54.30"


def test_create_expense_defaults_date_to_today(auth_client):
    expense = add_expense(auth_client, "Snack", 3, date=None)
    assert expense["date"] == date.today().isoformat()


def test_create_expense_validation_errors(auth_client):
    resp = auth_client.post("/api/expenses", json={
        "description": "", "amount": 0, "category": "pets", "date": "2999-01-01",
    })
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {e["field"] for e in body["errors"]} == {"description", "amount", "category", "date"}


def test_malformed_json_body(auth_client):
    resp = auth_client.post("/api/expenses", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_list_filters_and_sorts(auth_client, may_dining):
    add_expense(auth_client, "Train ticket", 25, category="travel")
    resp = auth_client.get("/api/expenses?category=dining&sortBy=amount&sortOrder=asc")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert [e["amount"] for e in data["expenses"]] == [20, 30, 50]
    assert data["summary"]["totalAmount"] == 100
    assert data["categoryBreakdown"][0]["category"] == "dining"
    assert data["filters"]["sortBy"] == "amount"


def test_list_summary_covers_all_pages(auth_client, may_dining):
    add_expense(auth_client, "Train ticket", 25, category="travel")
    data = auth_client.get("/api/expenses?limit=1").get_json()["data"]
    assert len(data["expenses"]) == 1
    assert data["summary"] == {
        "totalAmount": 125,
        "count": 4,
        "avgAmount": 31.25,
        "maxAmount": 50,
        "minAmount": 20,
        "formattedTotalAmount": "$125.00",
        "formattedAvgAmount": "$31.25",
        "formattedMaxAmount": "$50.00",
        "formattedMinAmount": "$20.00",
    }
    assert [(r["category"], r["totalAmount"], r["count"], r["percentage"]) for r in data["categoryBreakdown"]] == [
        ("dining", 100, 3, 80.0),
        ("travel", 25, 1, 20.0),
    ]

    empty = auth_client.get("/api/expenses?category=travel&minAmount=1000").get_json()["data"]
    assert empty["summary"]["count"] == 0
    assert empty["summary"]["formattedTotalAmount"] == "$0.00"
    assert empty["categoryBreakdown"] == []


def test_list_pagination(auth_client, may_dining):
    data = auth_client.get("/api/expenses?limit=2&page=1").get_json()["data"]
    assert len(data["expenses"]) == 2
    assert data["pagination"] == {
        "currentPage": 1, "totalPages": 2, "totalExpenses": 3, "hasNext": True, "hasPrev": False, "limit": 2,
    }
    page_two = auth_client.get("/api/expenses?limit=2&page=2").get_json()["data"]
    assert len(page_two["expenses"]) == 1
    assert page_two["pagination"]["hasNext"] is False
    assert page_two["pagination"]["hasPrev"] is True


def test_list_defaults_to_newest_first(auth_client, may_dining):
    dates = [e["date"] for e in auth_client.get("/api/expenses").get_json()["data"]["expenses"]]
    assert dates == ["2024-05-17", "2024-05-10", "2024-05-03"]


def test_list_search_and_ranges(auth_client, may_dining):
    data = auth_client.get("/api/expenses?search=SUSHI").get_json()["data"]
    assert [e["description"] for e in data["expenses"]] == ["Sushi lunch"]

    data = auth_client.get("/api/expenses?minAmount=25&maxAmount=50").get_json()["data"]
    assert sorted(e["amount"] for e in data["expenses"]) == [30, 50]

    data = auth_client.get("/api/expenses?startDate=2024-05-03&endDate=2024-05-10").get_json()["data"]
    assert sorted(e["amount"] for e in data["expenses"]) == [20, 30]


def test_list_rejects_bad_query(auth_client):
    resp = auth_client.get("/api/expenses?sortBy=password&page=0&minAmount=abc")
    assert resp.status_code == 400
    assert {e["field"] for e in resp.get_json()["errors"]} == {"sortBy", "page", "minAmount"}


def test_get_update_delete(auth_client, may_dining):
    expense_id = may_dining[0]["id"]
    assert auth_client.get(f"/api/expenses/{expense_id}").get_json()["data"]["expense"]["amount"] == 50

    resp = auth_client.put(f"/api/expenses/{expense_id}", json={"amount": 55, "category": "entertainment"})
    assert resp.status_code == 200
    updated = resp.get_json()["data"]["expense"]
    assert updated["amount"] == 55
    assert updated["category"] == "entertainment"
    assert updated["description"] == "Pizza night"

    bad = auth_client.put(f"/api/expenses/{expense_id}", json={"amount": -1})
    assert bad.status_code == 400

    assert auth_client.delete(f"/api/expenses/{expense_id}").status_code == 200
    missing = auth_client.get(f"/api/expenses/{expense_id}")
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "Expense not found"


def test_invalid_id_and_foreign_records(auth_client, other_client, may_dining):
    assert auth_client.get("/api/expenses/abc").status_code == 400
    expense_id = may_dining[0]["id"]
    assert other_client.get(f"/api/expenses/{expense_id}").status_code == 404
    assert other_client.delete(f"/api/expenses/{expense_id}").status_code == 404
    assert other_client.get("/api/expenses").get_json()["data"]["pagination"]["totalExpenses"] == 0


def test_stats(auth_client, may_dining):
    add_expense(auth_client, "Rent", 900, category="housing", date="2024-06-01")
    data = auth_client.get("/api/expenses/stats").get_json()["data"]
    assert data["overallStats"]["totalAmount"] == 1000
    assert data["overallStats"]["totalExpenses"] == 4
    assert [c["category"] for c in data["categoryStats"]] == ["housing", "dining"]

    may = auth_client.get("/api/expenses/stats?startDate=2024-05-01&endDate=2024-05-31").get_json()["data"]
    assert may["overallStats"]["totalAmount"] == 100
    assert may["categoryStats"][0]["avgAmount"] == 100 / 3


def test_monthly_summary_for_past_month(auth_client, may_dining):
    resp = auth_client.get("/api/expenses/summary/monthly?month=5&year=2024")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    summary = data["summary"]
    assert summary["monthName"] == "May"
    assert summary["totalSpending"] == 100
    assert summary["totalExpenses"] == 3
    assert summary["averagePerDay"] == 100 / 31
    assert summary["daysTracked"] == 31
    assert summary["formattedTotalSpending"] == "$100.00"

    assert data["comparison"]["previousMonth"] == {
        "month": 4, "year": 2024, "totalSpending": 0, "formattedTotal": "$0.00",
    }
    assert data["comparison"]["changeType"] == "no_change"

    breakdown = data["breakdown"]
    assert breakdown["categoryBreakdown"][0]["percentage"] == 100.0
    assert [d["day"] for d in breakdown["dailySpending"]] == [3, 10, 17]
    assert [w["week"] for w in breakdown["weeklySpending"]] == [18, 19, 20]
    assert [e["amount"] for e in breakdown["topExpenses"]] == [50, 30, 20]
    assert [i["type"] for i in data["insights"]] == ["category", "expense"]


def test_monthly_summary_trend_against_previous_month(auth_client, may_dining):
    add_expense(auth_client, "Groceries", 100, category="groceries", date="2024-04-12")
    add_expense(auth_client, "Cinema", 15, category="entertainment", date="2024-05-20")
    data = auth_client.get("/api/expenses/summary/monthly?month=5&year=2024").get_json()["data"]
    assert data["comparison"]["monthOverMonthChange"] == 15.0
    assert data["comparison"]["changeType"] == "increase"
    trend = data["insights"][0]
    assert trend["type"] == "trend"
    assert trend["level"] == "info"


def test_monthly_summary_empty_period(auth_client):
    data = auth_client.get("/api/expenses/summary/monthly?month=2&year=2023").get_json()["data"]
    assert data["summary"]["totalSpending"] == 0
    assert data["summary"]["totalExpenses"] == 0
    assert data["summary"]["averagePerDay"] == 0
    assert data["breakdown"]["categoryBreakdown"] == []
    assert data["insights"] == []


def test_monthly_summary_rejects_bad_period(auth_client):
    resp = auth_client.get("/api/expenses/summary/monthly?month=13")
    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "month"


def test_yearly_summary(auth_client, may_dining):
    add_expense(auth_client, "Flight", 200, category="travel", date="2024-02-14")
    data = auth_client.get("/api/expenses/summary/yearly?year=2024").get_json()["data"]
    assert data["totalSpending"] == 300
    assert data["totalExpenses"] == 4
    assert data["averageMonthly"] == 25
    assert data["monthlyBreakdown"][1]["totalAmount"] == 200
    assert data["monthlyBreakdown"][4]["totalAmount"] == 100
    assert data["categoryBreakdown"][0]["category"] == "travel"
    assert data["categoryBreakdown"][0]["percentage"] == 66.67
    assert data["formattedTotal"] == "$300.00"


def test_categories_and_date_range(auth_client):
    empty = auth_client.get("/api/expenses/date-range").get_json()["data"]
    assert empty == {"earliestDate": None, "latestDate": None, "hasExpenses": False}

    add_expense(auth_client, "Bus", 3, category="transportation", date="2024-01-05")
    add_expense(auth_client, "Lunch", 12, category="dining", date="2024-03-09")

    cats = auth_client.get("/api/expenses/categories").get_json()["data"]
    assert cats["userCategories"] == ["dining", "transportation"]
    assert cats["categoriesWithData"] == 2
    assert len(cats["allCategories"]) == 13

    span = auth_client.get("/api/expenses/date-range").get_json()["data"]
    assert span == {"earliestDate": "2024-01-05", "latestDate": "2024-03-09", "hasExpenses": True}
