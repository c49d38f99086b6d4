"""Image type value object: the evidence regime of a food photo."""

from enum import Enum


class ImageType(str, Enum):
    """Evidence regime detected by the image-type classifier.

    PACKAGED: nutrition facts label visible on a package.
    RESTAURANT: known chain menu item.
    PREPARED: everything else (home-cooked, plated, raw produce).
    """

    PACKAGED = "packaged"
    RESTAURANT = "restaurant"
    PREPARED = "prepared"
