"""
HTTP tests for the merchant routers.

Tests cover:
- The {"data", "meta"} envelope
- Error statuses: 400, 404, 409, 415, 422
- Menu, inventory and reporting endpoints end to end
- CSV export followed by download
"""

import csv
import io


API = "/api/merchant"


class TestEnvelope:
    """Tests for the response shape"""

    def test_list_has_data_and_meta(self, seeded_client):
        response = seeded_client.get(f"{API}/categories")

        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body["data"]] == ["cat_1", "cat_2", "cat_3"]
        assert body["meta"]["total"] == 3
        assert "timestamp" in body["meta"]

    def test_errors_use_detail(self, seeded_client):
        response = seeded_client.get(f"{API}/dish/dish_99")

        assert response.status_code == 404
        assert response.json() == {"detail": "Dish dish_99 not found"}


class TestMenuEndpoints:
    """Tests for /categories, /category, /dishes and /dish"""

    def test_create_category(self, client):
        response = client.post(f"{API}/category", json={"name": "Soups"})

        assert response.status_code == 201
        body = response.json()
        assert body["data"]["id"] == "cat_1"
        assert body["meta"]["message"] == "Category created successfully"

    def test_create_category_missing_name_is_422(self, client):
        response = client.post(f"{API}/category", json={"description": "No name"})
        assert response.status_code == 422

    def test_update_category_requires_a_field(self, seeded_client):
        response = seeded_client.put(f"{API}/category/cat_1", json={})
        assert response.status_code == 422

    def test_bad_category_id_pattern(self, seeded_client):
        response = seeded_client.get(f"{API}/category/category-1")
        assert response.status_code == 422

    def test_delete_referenced_category_conflicts(self, seeded_client):
        response = seeded_client.delete(f"{API}/category/cat_1")
        assert response.status_code == 409

    def test_delete_unreferenced_category(self, seeded_client):
        response = seeded_client.delete(f"{API}/category/cat_3")

        assert response.status_code == 200
        assert response.json()["data"] == {"deleted": True}

    def test_sort_categories(self, seeded_client):
        response = seeded_client.put(
            f"{API}/categories/sort",
            json=[{"id": "cat_3", "sort_order": 1}, {"id": "cat_1", "sort_order": 3}],
        )

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["data"]] == ["cat_3", "cat_2", "cat_1"]
        assert response.json()["meta"]["updated"] == 2

    def test_sort_categories_empty_body_is_400(self, seeded_client):
        response = seeded_client.put(f"{API}/categories/sort", json=[])
        assert response.status_code == 400

    def test_list_dishes_with_filters(self, seeded_client):
        response = seeded_client.get(f"{API}/dishes", params={"status": "on", "category_id": "cat_1"})

        body = response.json()
        assert [d["id"] for d in body["data"]] == ["dish_1", "dish_4"]
        assert body["meta"]["filters"]["status"] == "on"
        assert "is_spicy" not in body["meta"]["filters"]

    def test_create_dish_with_unknown_category_is_400(self, seeded_client):
        response = seeded_client.post(
            f"{API}/dish",
            json={"name": "Curanto", "category_id": "cat_42", "price": 18},
        )
        assert response.status_code == 400

    def test_create_dish_with_zero_price_is_422(self, seeded_client):
        response = seeded_client.post(
            f"{API}/dish",
            json={"name": "Curanto", "category_id": "cat_2", "price": 0},
        )
        assert response.status_code == 422

    def test_create_dish_then_read_inventory(self, seeded_client):
        created = seeded_client.post(
            f"{API}/dish",
            json={"name": "Curanto", "category_id": "cat_2", "price": 18, "stock": 3},
        )
        dish_id = created.json()["data"]["id"]

        response = seeded_client.get(f"{API}/dish/{dish_id}/inventory")

        assert response.status_code == 200
        assert response.json()["data"]["stock"] == 3
        assert response.json()["meta"]["stock_status"] == "low"

    def test_batch_status(self, seeded_client):
        response = seeded_client.put(
            f"{API}/dishes/batch-status",
            json={"dish_ids": ["dish_1", "dish_77"], "status": "off"},
        )

        meta = response.json()["meta"]
        assert response.status_code == 200
        assert (meta["updated"], meta["requested"]) == (1, 2)

    def test_batch_status_rejects_bad_ids(self, seeded_client):
        response = seeded_client.put(
            f"{API}/dishes/batch-status",
            json={"dish_ids": ["not-a-dish"], "status": "off"},
        )
        assert response.status_code == 422

    def test_upload_image(self, seeded_client):
        response = seeded_client.post(
            f"{API}/upload/dish-image",
            json={"dish_id": "dish_2", "mimetype": "image/webp", "size": 2048},
        )

        assert response.status_code == 200
        assert response.json()["data"]["image_url"].endswith(".webp")

    def test_non_json_body_is_415(self, client):
        response = client.post(
            f"{API}/category",
            content="name=Soups",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 415


class TestInventoryEndpoints:
    """Tests for stock writes and inventory queries"""

    def test_update_stock_reports_previous(self, seeded_client):
        response = seeded_client.put(f"{API}/dish/dish_1/stock", json={"stock": 12})

        meta = response.json()["meta"]
        assert response.status_code == 200
        assert (meta["previous_stock"], meta["new_stock"]) == (20, 12)

    def test_update_stock_past_expiry_is_422(self, seeded_client):
        response = seeded_client.put(
            f"{API}/dish/dish_1/stock",
            json={"stock": 12, "expiry_date": "2020-01-01"},
        )
        assert response.status_code == 422

    def test_adjust_stock_clamped(self, seeded_client):
        response = seeded_client.post(f"{API}/dish/dish_2/adjust-stock", json={"adjustment": -10})

        meta = response.json()["meta"]
        assert meta["new_stock"] == 0
        assert meta["applied_adjustment"] == -5
        assert meta["reason"] == "No reason provided"

    def test_adjust_stock_without_record_is_404(self, seeded_client):
        response = seeded_client.post(f"{API}/dish/dish_99/adjust-stock", json={"adjustment": 1})
        assert response.status_code == 404

    def test_batch_update(self, seeded_client):
        response = seeded_client.put(
            f"{API}/inventory/batch-update",
            json=[{"dish_id": "dish_1", "stock": 3}, {"dish_id": "dish_4", "stock": 9}],
        )

        body = response.json()
        assert response.status_code == 200
        assert body["meta"]["updated"] == 2
        assert [r["dish_id"] for r in body["data"]] == ["dish_1", "dish_4"]

    def test_batch_update_empty_is_400(self, seeded_client):
        response = seeded_client.put(f"{API}/inventory/batch-update", json=[])
        assert response.status_code == 400

    def test_alert_threshold_triggered(self, seeded_client):
        response = seeded_client.put(
            f"{API}/dish/dish_4/alert-threshold",
            json={"alert_threshold": 8},
        )
        assert response.json()["meta"]["alert_status"] == "triggered"

    def test_low_stock_with_zero_threshold(self, seeded_client):
        response = seeded_client.get(f"{API}/dishes/low-stock", params={"threshold": 0})

        meta = response.json()["meta"]
        assert meta["total"] == 1
        assert meta["threshold"] == 0
        assert meta["urgent_items"] == 1

    def test_low_stock_default_threshold(self, seeded_client):
        meta = seeded_client.get(f"{API}/dishes/low-stock").json()["meta"]
        assert meta["threshold"] == "default"
        assert meta["total"] == 2

    def test_out_of_stock(self, seeded_client):
        body = seeded_client.get(f"{API}/dishes/out-of-stock").json()

        assert [row["dish_id"] for row in body["data"]] == ["dish_3"]
        assert body["meta"]["message"] == "Immediate attention required"

    def test_summary(self, seeded_client):
        data = seeded_client.get(f"{API}/inventory/summary").json()["data"]
        assert data["total_value"] == 58.0

    def test_expiring_default_window(self, seeded_client):
        body = seeded_client.get(f"{API}/inventory/expiring").json()

        assert body["meta"]["within_days"] == 7
        assert [r["dish_id"] for r in body["data"]] == ["dish_2"]

    def test_expiring_window_out_of_range(self, seeded_client):
        response = seeded_client.get(f"{API}/inventory/expiring", params={"days": 0})
        assert response.status_code == 422

    def test_sync(self, seeded_client):
        body = seeded_client.post(f"{API}/inventory/sync").json()
        assert body["data"]["created"] == 0


class TestReportEndpoints:
    """Tests for statistics, analytics and export"""

    def test_order_statistics(self, seeded_client):
        body = seeded_client.get(f"{API}/orders/statistics").json()

        assert body["data"]["metrics"]["revenue_growth_rate"] == 25.0
        assert body["meta"]["data_points"]["top_dishes"] == 3

    def test_promotion_analytics_unknown_is_404(self, seeded_client):
        response = seeded_client.get(f"{API}/promotion/promo_9/analytics")
        assert response.status_code == 404

    def test_promotion_analytics(self, seeded_client):
        body = seeded_client.get(f"{API}/promotion/promo_1/analytics").json()

        assert body["meta"]["is_active"] is True
        assert body["meta"]["effectiveness_score"] == 85.0

    def test_dashboard(self, seeded_client):
        data = seeded_client.get(f"{API}/dashboard/summary").json()["data"]
        assert data["alerts"]["negative_reviews"] == 10

    def test_custom_analytics(self, seeded_client):
        response = seeded_client.post(
            f"{API}/analytics/custom",
            json={
                "metrics": ["revenue", "orders"],
                "date_range": {
                    "start_date": "2024-05-01T00:00:00Z",
                    "end_date": "2024-05-31T00:00:00Z",
                },
            },
        )

        body = response.json()
        assert response.status_code == 200
        assert body["data"]["analytics"] == {"revenue": 1000.0, "orders": 50}
        assert body["data"]["parameters"]["aggregation"] == "sum"
        assert body["meta"]["metrics_count"] == 2

    def test_custom_analytics_rejects_reversed_range(self, seeded_client):
        response = seeded_client.post(
            f"{API}/analytics/custom",
            json={
                "metrics": ["revenue"],
                "date_range": {
                    "start_date": "2024-05-31T00:00:00Z",
                    "end_date": "2024-05-01T00:00:00Z",
                },
            },
        )
        assert response.status_code == 422

    def test_custom_analytics_rejects_unknown_metric(self, seeded_client):
        response = seeded_client.post(
            f"{API}/analytics/custom",
            json={
                "metrics": ["vibes"],
                "date_range": {
                    "start_date": "2024-05-01T00:00:00Z",
                    "end_date": "2024-05-31T00:00:00Z",
                },
            },
        )
        assert response.status_code == 422

    def test_json_export(self, seeded_client):
        body = seeded_client.get(
            f"{API}/reports/export",
            params={"type": "sales", "period": "week"},
        ).json()

        assert body["data"]["summary"]["period"] == "week"
        assert body["meta"]["record_count"] == 1
        assert body["meta"]["format"] == "json"

    def test_unsupported_export_type_is_400(self, seeded_client):
        response = seeded_client.get(f"{API}/reports/export", params={"type": "payroll"})
        assert response.status_code == 400

    def test_csv_export_then_download(self, seeded_client):
        exported = seeded_client.get(
            f"{API}/reports/export",
            params={"type": "inventory", "format": "csv"},
        ).json()["data"]

        assert exported["record_count"] == 4
        response = seeded_client.get(exported["download_url"])

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0][0] == "Dish ID"
        assert len(rows) == 5

    def test_download_rejects_arbitrary_files(self, seeded_client):
        response = seeded_client.get(f"{API}/downloads/dishes.json")
        assert response.status_code == 400
