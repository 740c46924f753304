# Image operations - EXIF orientation lookup, fit-mode resizing and JPEG encoding (Pillow)

from PIL import Image, ImageOps
from typing import Optional, Tuple

ORIENTATION_TAG = 0x0112
JPEG_QUALITY = 80


def read_orientation(input_path: str) -> Optional[int]:
    """Return the EXIF orientation (1-8) of an image, or None if it has none"""
    with Image.open(input_path) as img:
        return img.getexif().get(ORIENTATION_TAG)


def is_portrait_orientation(orientation: Optional[int]) -> bool:
    """Orientations 5-8 store the image rotated by 90 degrees"""
    return orientation is not None and 5 <= orientation <= 8


def fit_inside(size: Tuple[int, int], box: Tuple[int, int]) -> Tuple[int, int]:
    """Largest size with the same aspect ratio that fits into box"""
    width, height = size
    scale = min(box[0] / width, box[1] / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def resize_image(input_path: str, output_path: str, width: int, height: int, fit: str = "inside"):
    """
    Resize an image and write it as a progressive JPEG

    Args:
        fit: "inside" keeps the aspect ratio within width x height,
             "cover" crops to fill width x height exactly,
             "contain" letterboxes to width x height
    """
    with Image.open(input_path) as img:
        exif = img.info.get("exif")
        img = img.convert("RGB")

        if fit == "inside":
            resized = img.resize(fit_inside(img.size, (width, height)), Image.LANCZOS)
        elif fit == "cover":
            resized = ImageOps.fit(img, (width, height), Image.LANCZOS)
        elif fit == "contain":
            resized = ImageOps.pad(img, (width, height), Image.LANCZOS, color=(0, 0, 0))
        else:
            raise ValueError(f"Unknown fit mode: {fit}")

        save_kwargs = {"format": "JPEG", "quality": JPEG_QUALITY, "optimize": True, "progressive": True}
        if exif:
            save_kwargs["exif"] = exif
        resized.save(output_path, **save_kwargs)
