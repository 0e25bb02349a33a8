from enum import Enum


class FuelCategory(str, Enum):
    UNLEADED = "unleaded"
    PREMIUM = "premium"
    DIESEL = "diesel"


# Upstream FuelCheck product codes per canonical category.
# Premium deliberately merges both octane grades into one bucket.
CATEGORY_CODES: dict[FuelCategory, tuple[str, ...]] = {
    FuelCategory.UNLEADED: ("U91", "E10"),
    FuelCategory.PREMIUM: ("P95", "P98"),
    FuelCategory.DIESEL: ("DL",),
}

_CODE_TO_CATEGORY = {
    code: category for category, codes in CATEGORY_CODES.items() for code in codes
}


def category_for_code(code) -> FuelCategory | None:
    if code is None:
        return None
    return _CODE_TO_CATEGORY.get(str(code).strip().upper())
