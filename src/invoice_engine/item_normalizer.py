"""
Order Item Normalizer
Maps the heterogeneous item payloads written by every generation of the
storefront into one canonical NormalizedItem shape.
"""
from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from . import invoice_config as cfg
from .field_resolver import (
    as_amount,
    as_image_list,
    as_image_sequence,
    as_positive_int,
    as_text,
    resolve,
)
from .image_urls import public_image_url
from .logger import get_logger
from .models import NormalizedItem

PLACEHOLDER_NAME = "Product"

# Candidate key paths per concept, highest priority first. Support a new
# writer by appending its keys here.
ITEM_FIELD_PATHS_VERSION = 4
ITEM_FIELD_PATHS: Dict[str, Tuple[str, ...]] = {
    "name": (
        "name",
        "product_name",
        "product.name",
        "title",
        "product.title",
        "productName",
    ),
    "images": (
        "images",
        "image",
        "product_image",
        "image_url",
        "productImage",
        "thumbnail",
        "product_thumbnail",
        "product.images",
        "product.image",
        "product.image_url",
        "product.thumbnail",
        "product.product_image",
    ),
    "unit_price": (
        "price",
        "product.price",
        "unit_price",
        "productPrice",
    ),
    "quantity": ("quantity", "qty"),
    "size": ("size", "product_size", "productSize"),
    "color": ("color", "product_color", "productColor"),
    "product_id": ("product_id", "product.id", "productId"),
}

# Image keys that hold a list of images; a plain string there is ignored
MULTI_IMAGE_PATHS = frozenset({"images", "product.images"})


class ItemNormalizer:
    """Normalizes raw order items into NormalizedItem values"""

    def __init__(self, field_paths: Mapping[str, Sequence[str]] = None):
        self.field_paths = dict(field_paths or ITEM_FIELD_PATHS)
        self.logger = get_logger()

    def normalize(self, raw_items: Any) -> List[NormalizedItem]:
        """
        Normalize an order's ``items`` value

        Args:
            raw_items: A list of item records, a single record, or the
                JSON text of either. Unparseable text yields no items.

        Returns:
            Normalized items in input order
        """
        entries = self.parse_items(raw_items)
        items = []
        for entry in entries:
            item = self.normalize_entry(entry)
            if item is not None:
                items.append(item)
        return items

    def parse_items(self, raw_items: Any) -> List[Any]:
        """Turn the stored ``items`` value into a list of raw entries"""
        if isinstance(raw_items, str):
            if not raw_items.strip():
                return []
            try:
                raw_items = json.loads(raw_items)
            except (ValueError, RecursionError) as e:
                self.logger.warning(f"Unreadable items payload ignored: {e}", component="Normalizer")
                return []

        if isinstance(raw_items, Mapping):
            return [raw_items]
        if isinstance(raw_items, (list, tuple)):
            return list(raw_items)
        return []

    def normalize_entry(self, entry: Any) -> Optional[NormalizedItem]:
        """
        Normalize a single raw entry

        Returns:
            NormalizedItem, or None when the entry carries nothing usable
        """
        if isinstance(entry, str):
            # Some early orders stored bare product ids instead of records
            product_id = entry.strip()
            if not product_id:
                return None
            return NormalizedItem(name=PLACEHOLDER_NAME, product_id=product_id)

        if not isinstance(entry, Mapping) or not entry:
            return None

        paths = self.field_paths
        return NormalizedItem(
            name=resolve(entry, paths["name"], as_text, PLACEHOLDER_NAME),
            images=self._resolve_images(entry),
            unit_price=resolve(entry, paths["unit_price"], as_amount, Decimal("0")),
            quantity=resolve(entry, paths["quantity"], as_positive_int, 1),
            size=resolve(entry, paths["size"], as_text, ""),
            color=resolve(entry, paths["color"], as_text, ""),
            product_id=resolve(entry, paths["product_id"], as_text, None),
        )

    def _resolve_images(self, entry: Mapping) -> Tuple[str, ...]:
        for path in self.field_paths["images"]:
            coerce = as_image_sequence if path in MULTI_IMAGE_PATHS else as_image_list
            images = resolve(entry, (path,), coerce, None)
            if images:
                return images
        return ()

    @staticmethod
    def preview(items: Sequence[NormalizedItem], count: int = None) -> List[NormalizedItem]:
        """First ``count`` items (order preserved) for the order thumbnail grid"""
        count = cfg.PREVIEW_ITEM_COUNT if count is None else count
        return list(items[:max(count, 0)])

    @classmethod
    def preview_thumbnails(cls, items: Sequence[NormalizedItem], count: int = None) -> List[str]:
        """Public URL of the first image of each previewed item ("" when it has none)"""
        return [public_image_url(item.images) for item in cls.preview(items, count)]
