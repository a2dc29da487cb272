"""Unit tests for the shop: product normalization, stock tiles and the
sales operations in bizdesk.services.shop."""

import pytest

from bizdesk.core.exceptions import CollaboratorError, ForbiddenError, ValidationError
from bizdesk.services import aggregation, shop
from bizdesk.services.entities import SHOP
from bizdesk.services.list_filter import filter_records
from bizdesk.services.list_sort import ASC, DESC, sort_records
from bizdesk.services.normalizer import normalize_product, normalize_sale, render_record
from bizdesk.services.payloads import build_create_payload, build_update_payload


@pytest.fixture()
def products(fake_shop_api):
    return [normalize_product(r) for r in fake_shop_api.rows]


class TestNormalizeProduct:
    def test_snake_and_camel_keys(self):
        a = normalize_product({"id": 1, "stock_quantity": 3, "image_url": "/a.png",
                               "created_at": "2024-01-01"})
        b = normalize_product({"id": 1, "stockQuantity": 3, "imageUrl": "/a.png",
                               "createdAt": "2024-01-01"})
        assert a == b
        assert a.stock_quantity == 3

    def test_missing_fields_default(self):
        record = normalize_product({})
        assert (record.name, record.stock_quantity, record.price) == ("", 0, None)
        assert record.stock_level == "out_of_stock"

    def test_idempotent(self, products):
        assert [normalize_product(p) for p in products] == products

    def test_render_adds_stock_level(self, products):
        row = render_record(products[1])
        assert row["stockQuantity"] == 4
        assert row["stockLevel"] == "low_stock"
        assert row["priceDisplay"] == "TZS 45,000"

    def test_sale_flags_and_amounts(self):
        sale = normalize_sale({"id": 9, "product_id": 2, "unit_price": "45000.50",
                               "total_amount": "90001", "is_reversed": 1})
        assert (sale.product_id, sale.unit_price, sale.total_amount) == (2, 45000.5, 90001)
        assert sale.is_reversed is True


class TestShopListPipeline:
    def test_search_covers_category(self, products):
        found = filter_records(products, "ACCESS", None, SHOP.searchable)
        assert [p.id for p in found] == [2, 3]

    def test_category_and_stock_level_filters(self, products):
        active = SHOP.parse_filters({"category": "furniture", "stockLevel": "all"})
        assert active == {"category": "furniture"}
        low = filter_records(products, "", SHOP.parse_filters({"stockLevel": "low_stock"}),
                             SHOP.searchable)
        assert [p.id for p in low] == [2]

    def test_sort_by_stock_and_price(self, products):
        by_stock = sort_records(products, SHOP.sort_key("stockQuantity"), DESC)
        assert [p.id for p in by_stock] == [1, 4, 2, 3]
        by_price = sort_records(products, SHOP.sort_key("price"), ASC)
        assert [p.id for p in by_price] == [2, 3, 1, 4]

    def test_stock_tiles_cover_every_product(self, products):
        tiles = aggregation.tiles_payload(aggregation.product_stock_tiles(products))
        assert tiles == [
            {"label": "out_of_stock", "count": 1, "percentage": "25.0"},
            {"label": "low_stock", "count": 1, "percentage": "25.0"},
            {"label": "in_stock", "count": 2, "percentage": "50.0"},
        ]

    def test_shop_summary(self, products):
        summary = aggregation.shop_summary(products)
        assert summary == {
            "totalProducts": 4,
            "lowStockItems": 2,
            "outOfStockItems": 1,
            "averagePrice": 213750,
            "stockValue": 11130000,
        }

    def test_shop_summary_empty(self):
        assert aggregation.shop_summary([])["averagePrice"] == 0


class TestProductForms:
    def test_create_payload(self):
        payload = build_create_payload("shop", {
            "name": "Monitor Arm", "description": "Dual", "price": "85000",
            "category": "accessories", "stock_quantity": "15", "imageUrl": "",
        })
        assert payload == {"name": "Monitor Arm", "description": "Dual", "price": 85000,
                           "category": "accessories", "stockQuantity": 15}

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError) as exc:
            build_create_payload("shop", {"name": "x", "description": "y", "price": 1,
                                          "category": "z", "stockQuantity": -1})
        assert exc.value.details == {"stockQuantity": "Stock quantity must be at least 0"}

    def test_only_staff_edit_products(self):
        assert build_update_payload("shop", {"price": "99"}, "controller") == {"price": 99}
        with pytest.raises(ForbiddenError):
            build_update_payload("shop", {"price": "99"}, "client")


class TestSales:
    def test_sell_returns_sale_and_product(self, fake_shop_api):
        sale, product = shop.sell(fake_shop_api, {
            "productId": "2", "quantity": "3", "customerName": "Neema",
            "customerEmail": "", "customerPhone": "",
        }, "admin")
        _, (payload,) = fake_shop_api.calls[-1]
        assert payload == {"productId": 2, "quantity": 3, "customerName": "Neema"}
        assert (sale.id, sale.quantity, sale.total_amount) == (4, 3, 135000)
        assert product.stock_quantity == 1
        assert product.stock_level == "low_stock"

    def test_sell_validates_before_calling(self, fake_shop_api):
        with pytest.raises(ValidationError) as exc:
            shop.sell(fake_shop_api, {"productId": 2, "quantity": 0}, "admin")
        assert set(exc.value.details) == {"quantity"}
        assert fake_shop_api.calls == []

    def test_sell_forbidden_for_client(self, fake_shop_api):
        with pytest.raises(ForbiddenError):
            shop.sell(fake_shop_api, {"productId": 2, "quantity": 1}, "client")
        assert fake_shop_api.calls == []

    def test_insufficient_stock_propagates(self, fake_shop_api):
        with pytest.raises(CollaboratorError) as exc:
            shop.sell(fake_shop_api, {"productId": 3, "quantity": 1}, "controller")
        assert exc.value.status_code == 400
        assert fake_shop_api.sales[-1]["id"] == 3

    def test_reverse_sale_restores_stock(self, fake_shop_api):
        result = shop.reverse_sale(fake_shop_api, {"saleId": 1}, "admin")
        assert result["reversedQuantity"] == 2
        assert result["reversedAmount"] == 300000
        assert result["product"].stock_quantity == 27

    def test_sales_history_newest_first_with_totals(self, fake_shop_api):
        history = shop.sales_history(fake_shop_api, "admin")
        assert [s.id for s in history["items"]] == [2, 3, 1]
        assert history["totalSales"] == 2
        assert history["reversedSales"] == 1
        assert history["unitsSold"] == 3
        assert history["revenue"] == 900000

    def test_sales_history_search_and_hide_reversed(self, fake_shop_api):
        history = shop.sales_history(fake_shop_api, "admin", query="juma")
        assert [s.id for s in history["items"]] == [2]
        history = shop.sales_history(fake_shop_api, "admin", include_reversed=False)
        assert [s.id for s in history["items"]] == [3, 1]
        # totals always describe the full history
        assert history["revenue"] == 900000

    @pytest.mark.parametrize("raw, expected", [
        (900000.0, 900000),
        ({"total_revenue": "1250.5"}, 1250.5),
        ({"totalRevenue": 10}, 10),
        ({}, 0),
        (None, 0),
    ])
    def test_total_revenue_shapes(self, fake_shop_api, raw, expected):
        fake_shop_api.get_total_revenue = lambda: raw
        assert shop.total_revenue(fake_shop_api, "admin") == expected


class TestStockAndPrice:
    def test_adjust_stock_sets_absolute_quantity(self, fake_shop_api):
        product = shop.adjust_stock(fake_shop_api, 2, {"quantity": "30"}, "admin")
        assert fake_shop_api.calls[-1] == ("adjust_stock", (2, 30))
        assert product.stock_quantity == 30
        assert product.name == "Laptop Stand"

    def test_adjust_price_empty_response_keeps_product(self, fake_shop_api):
        fake_shop_api.adjust_price = lambda record_id, price: {}
        product = shop.adjust_price(fake_shop_api, 1, {"price": "175000"}, "controller")
        assert (product.name, product.price, product.stock_quantity) == \
            ("Office Chair", 175000, 25)

    def test_adjust_stock_forbidden_for_client(self, fake_shop_api):
        with pytest.raises(ForbiddenError):
            shop.adjust_stock(fake_shop_api, 2, {"quantity": 5}, "client")
