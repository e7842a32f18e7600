from __future__ import annotations

from influencer_admin.catalog import filter_by_title, normalize_product, normalize_products


def test_thumbnail_priority():
    assert normalize_product({"id": 1, "image": {"src": "a.png"}, "images": [{"src": "b.png"}]}).thumbnail == "a.png"
    assert normalize_product({"id": 1, "images": [{"src": "b.png"}], "thumbnail": "c.png"}).thumbnail == "b.png"
    assert normalize_product({"id": 1, "thumbnail": {"src": "c.png"}}).thumbnail == "c.png"
    assert normalize_product({"id": 1, "thumbnail": "d.png"}).thumbnail == "d.png"
    assert normalize_product({"id": 1}).thumbnail is None


def test_title_falls_back_to_name():
    assert normalize_product({"id": 1, "name": "Mug"}).title == "Mug"
    assert normalize_product({"id": 1, "title": "", "name": "Mug"}).title == "Mug"
    assert normalize_product({"id": 1}).title == ""


def test_variant_fields():
    product = normalize_product(
        {
            "id": 1,
            "title": "T-Shirt",
            "image": {"src": "main.png"},
            "images": [{"id": 10, "src": "main.png"}, {"id": 11, "src": "red.png"}],
            "variants": [
                {"id": 501, "title": "Red", "price": "19.90", "compare_at_price": "25.00", "inventory_quantity": 4, "image_id": 11},
                {"variantId": 502, "title": "Blue", "stock": 2, "compareAtPrice": "21.00"},
                {"id": 503, "title": "Green", "price": "", "inventory": -3},
            ],
        }
    )

    red, blue, green = product.variants
    assert (red.variantId, red.price, red.compareAtPrice, red.stock, red.image) == (501, 19.9, 25.0, 4, "red.png")
    assert (blue.variantId, blue.price, blue.compareAtPrice, blue.stock, blue.image) == (502, 0.0, 21.0, 2, "main.png")
    assert (green.price, green.stock) == (0.0, 0)
    assert product.totalStock == 6


def test_product_without_variants_gets_synthetic_variant():
    product = normalize_product({"id": "p-1", "title": "Mug", "price": "5.50", "stock": 3, "thumbnail": "mug.png"})

    assert len(product.variants) == 1
    variant = product.variants[0]
    assert variant.variantId == "p-1"
    assert variant.title == "Mug"
    assert variant.price == 5.5
    assert variant.stock == 3
    assert variant.image == "mug.png"
    assert product.totalStock == 3


def test_normalize_products_drops_duplicates_and_missing_ids():
    products = normalize_products(
        [
            {"id": 1, "title": "First"},
            {"title": "No id"},
            {"id": "1", "title": "Duplicate"},
            {"id": 2, "title": "Second"},
        ]
    )

    assert [product.title for product in products] == ["First", "Second"]


def test_filter_by_title_is_case_insensitive():
    products = normalize_products([{"id": 1, "title": "Blue Mug"}, {"id": 2, "title": "Red Shirt"}])

    assert [product.id for product in filter_by_title(products, "  MUG ")] == [1]
    assert filter_by_title(products, "") == products
    assert filter_by_title(products, None) == products
