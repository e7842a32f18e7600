"""Normalisation of raw catalog payloads into ``CatalogProduct`` records.

Raw products come either from the Shopify Admin REST API or from the BRMH
products table mirror, so each field is read from a documented list of
candidate keys. The first candidate holding a usable value wins:

=================  ==========================================================
field              candidates
=================  ==========================================================
id                 ``id``
title              ``title`` -> ``name`` -> ``""``
thumbnail          ``image.src`` -> ``images[0].src`` -> ``thumbnail.src``
                   -> ``thumbnail``
variant id         ``id`` -> ``variantId``
variant price      ``price`` -> ``"0.00"``
compare-at price   ``compare_at_price`` -> ``compareAtPrice``
stock              ``inventory_quantity`` -> ``stock`` -> ``inventory`` -> 0
variant image      image matched by ``image_id`` -> variant ``image`` -> thumbnail
=================  ==========================================================

A raw product without variants becomes a single synthetic variant carrying the
product's own id, title, price and stock.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from influencer_admin.schemas import CatalogProduct, CatalogVariant


def _first(source: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None and value != "":
            return value
    return None


def _src(value: Any) -> str | None:
    if isinstance(value, dict):
        src = value.get("src")
        return src if isinstance(src, str) and src else None
    if isinstance(value, str) and value:
        return value
    return None


def _price(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return None


def _stock(source: dict[str, Any]) -> int:
    value = _first(source, "inventory_quantity", "stock", "inventory")
    try:
        return max(int(value), 0) if value is not None else 0
    except (TypeError, ValueError):
        return 0


def product_thumbnail(raw: dict[str, Any]) -> str | None:
    thumbnail = _src(raw.get("image"))
    if thumbnail:
        return thumbnail
    images = raw.get("images")
    if isinstance(images, list) and images:
        thumbnail = _src(images[0])
        if thumbnail:
            return thumbnail
    return _src(raw.get("thumbnail"))


def _variant_image(variant: dict[str, Any], images: list[Any], fallback: str | None) -> str | None:
    image_id = variant.get("image_id")
    if image_id is not None:
        for image in images:
            if isinstance(image, dict) and image.get("id") == image_id and _src(image):
                return _src(image)
    return _src(variant.get("image")) or fallback


def normalize_variant(variant: dict[str, Any], *, images: list[Any], fallback_image: str | None) -> CatalogVariant:
    return CatalogVariant(
        variantId=_first(variant, "id", "variantId"),
        title=str(_first(variant, "title", "name") or ""),
        price=_price(_first(variant, "price")) or 0.0,
        compareAtPrice=_price(_first(variant, "compare_at_price", "compareAtPrice")),
        stock=_stock(variant),
        image=_variant_image(variant, images, fallback_image),
    )


def normalize_product(raw: dict[str, Any]) -> CatalogProduct:
    thumbnail = product_thumbnail(raw)
    title = str(_first(raw, "title", "name") or "")
    images = raw.get("images") if isinstance(raw.get("images"), list) else []
    raw_variants = [variant for variant in raw.get("variants") or [] if isinstance(variant, dict)]

    if raw_variants:
        variants = [normalize_variant(variant, images=images, fallback_image=thumbnail) for variant in raw_variants]
    else:
        variants = [
            CatalogVariant(
                variantId=raw.get("id"),
                title=title,
                price=_price(raw.get("price")) or 0.0,
                compareAtPrice=_price(_first(raw, "compare_at_price", "compareAtPrice")),
                stock=_stock(raw),
                image=thumbnail,
            )
        ]

    return CatalogProduct(
        id=raw.get("id"),
        title=title,
        thumbnail=thumbnail,
        variants=variants,
        totalStock=sum(variant.stock for variant in variants),
    )


def normalize_products(raw_products: list[dict[str, Any]]) -> list[CatalogProduct]:
    """Normalise a page of raw products, keeping the first occurrence of each id."""
    seen: set[str] = set()
    products: list[CatalogProduct] = []
    for raw in raw_products:
        if raw.get("id") is None:
            continue
        key = str(raw["id"])
        if key in seen:
            continue
        seen.add(key)
        products.append(normalize_product(raw))
    return products


def filter_by_title(products: list[CatalogProduct], query: str | None) -> list[CatalogProduct]:
    needle = (query or "").strip().lower()
    if not needle:
        return products
    return [product for product in products if needle in product.title.lower()]
