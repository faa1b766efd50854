"""Backend-specific image URL builders."""
import logging
import re
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import urlencode

from cms_gateway.infrastructure.transformers.localization import PLACEHOLDER_IMAGE_URL, as_int

logger = logging.getLogger(__name__)

SANITY_CDN_URL = "https://cdn.sanity.io/images"

# image-<assetId>-<width>x<height>-<format>
_SANITY_REF = re.compile(r"^image-(?P<id>[A-Za-z0-9]+)-(?P<width>\d+)x(?P<height>\d+)-(?P<format>[a-z0-9]+)$")


class SanityImageBuilder:
    """Resolves Sanity image references into CDN URLs with transform parameters."""

    def __init__(self, project_id: str, dataset: str, quality: int = 85):
        self.project_id = project_id
        self.dataset = dataset
        self.quality = quality

    def url(
        self,
        image: Optional[Mapping[str, Any]],
        width: int = 800,
        height: Optional[int] = None
    ) -> str:
        """
        Build a cropped, auto-format image URL.

        Args:
            image: Raw Sanity image object (``{"asset": {"_ref": ...}}``)
            width: Target width in pixels
            height: Target height in pixels (defaults to ``width``, square crop)

        Returns:
            Absolute CDN URL, or the placeholder for missing or malformed refs
        """
        asset = (image or {}).get("asset") or {}
        ref = asset.get("_ref") or asset.get("_id")
        if not ref:
            return PLACEHOLDER_IMAGE_URL

        match = _SANITY_REF.match(ref)
        if not match:
            logger.warning(f"Malformed Sanity image reference: {ref!r}")
            return PLACEHOLDER_IMAGE_URL

        base = (
            f"{SANITY_CDN_URL}/{self.project_id}/{self.dataset}/"
            f"{match['id']}-{match['width']}x{match['height']}.{match['format']}"
        )
        params = [
            ("w", width),
            ("h", height or width),
            ("fit", "crop"),
            ("auto", "format"),
            ("q", self.quality),
        ]
        hotspot = (image or {}).get("hotspot") or {}
        if "x" in hotspot and "y" in hotspot:
            params += [("crop", "focalpoint"), ("fp-x", hotspot["x"]), ("fp-y", hotspot["y"])]
        return f"{base}?{urlencode(params)}"


class StrapiImageBuilder:
    """Resolves Strapi media objects (possibly relative uploads) to absolute URLs."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def absolute(self, url: str) -> str:
        if not url or url.startswith(("http://", "https://", "//")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def resolve(self, image: Optional[Mapping[str, Any]], width: Optional[int] = None) -> Tuple[str, int, int]:
        """
        Pick the best rendition of a Strapi media object.

        Args:
            image: Raw media object (``url``, ``width``, ``height``, ``formats``)
            width: Desired display width; the smallest responsive format at
                least this wide is used when available

        Returns:
            (absolute url, width, height); the placeholder with zero sizes
            when no image is present
        """
        image = unwrap_media(image)
        if not image or not image.get("url"):
            return PLACEHOLDER_IMAGE_URL, 0, 0

        chosen = image
        if width:
            candidates = [
                fmt for fmt in (image.get("formats") or {}).values()
                if isinstance(fmt, Mapping) and fmt.get("url") and as_int(fmt.get("width")) >= width
            ]
            if candidates:
                chosen = min(candidates, key=lambda fmt: as_int(fmt.get("width")))
        return self.absolute(chosen["url"]), as_int(chosen.get("width")), as_int(chosen.get("height"))

    def url(self, image: Optional[Mapping[str, Any]], width: Optional[int] = None) -> str:
        return self.resolve(image, width)[0]


def unwrap_media(image: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """Strapi v4 wraps media as ``{"data": {"id", "attributes"}}``; flatten it."""
    if not isinstance(image, Mapping):
        return None
    if "data" in image:
        image = image["data"]
        if not isinstance(image, Mapping):
            return None
    if "attributes" in image:
        return {"id": image.get("id"), **(image.get("attributes") or {})}
    return image
