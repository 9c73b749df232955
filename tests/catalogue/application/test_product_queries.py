"""Application tests for catalogue listing, filtering and search."""

from marketplace.catalogue.product.queries import list_products


class TestListProducts:
    def test_newest_first(self, vendor_id, make_product):
        first = make_product(vendor_id, title="First")
        second = make_product(vendor_id, title="Second")

        page = list_products()

        assert [str(p.id) for p in page.items] == [second, first]
        assert page.total == 2
        assert page.pages == 1

    def test_pagination(self, vendor_id, make_product):
        for i in range(5):
            make_product(vendor_id, title=f"Item {i}")

        page = list_products(page=2, limit=2)

        assert page.count == 2
        assert page.total == 5
        assert page.pages == 3
        assert page.page == 2

    def test_pages_follow_newest_first(self, vendor_id, make_product):
        ids = [make_product(vendor_id, title=f"Item {i}") for i in range(5)]

        page = list_products(page=2, limit=2)

        assert [str(p.id) for p in page.items] == [ids[2], ids[1]]

    def test_page_past_the_end_is_empty(self, vendor_id, make_product):
        make_product(vendor_id)
        page = list_products(page=3, limit=10)
        assert page.count == 0
        assert page.total == 1

    def test_category_filter(self, vendor_id, make_product):
        make_product(vendor_id, title="Laptop", category="Electronics")
        make_product(vendor_id, title="Chair", category="Furniture")

        page = list_products(category="Furniture")

        assert [p.title for p in page.items] == ["Chair"]

    def test_search_matches_title_or_description_case_insensitively(self, vendor_id, make_product):
        make_product(vendor_id, title="Wireless Mouse")
        make_product(vendor_id, title="Desk Lamp", description="LED lamp, works with any WIRELESS charger")
        make_product(vendor_id, title="Office Chair")

        page = list_products(search="wireless")

        assert sorted(p.title for p in page.items) == ["Desk Lamp", "Wireless Mouse"]

    def test_search_treats_pattern_characters_literally(self, vendor_id, make_product):
        make_product(vendor_id, title="C++ Primer")
        make_product(vendor_id, title="Cookbook")

        page = list_products(search="c++")

        assert [p.title for p in page.items] == ["C++ Primer"]

    def test_search_skips_missing_descriptions(self, vendor_id, make_product):
        make_product(vendor_id, title="Phone Stand")
        make_product(vendor_id, title="Desk Lamp")

        page = list_products(search="one")

        assert [p.title for p in page.items] == ["Phone Stand"]

    def test_empty_catalogue(self):
        page = list_products()
        assert page.total == 0
        assert page.pages == 0
