from app.pricing.errors import UnrecognizedPayloadError
from app.pricing.models import PriceObservation

FUEL_CODE_KEYS = ("fueltype", "fuel_type", "fuelTypeCode", "FuelType")
PRICE_KEYS = ("price", "Price")


def unwrap_list(payload, possible_keys: list[str]) -> list | None:
    """
    Some responses are { "X": [ ... ] }, some are a bare [ ... ].
    Returns None when neither shape matches.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for k in possible_keys:
            v = payload.get(k)
            if isinstance(v, list):
                return v
    return None


def _first(record: dict, keys: tuple[str, ...]):
    for k in keys:
        if record.get(k) is not None:
            return record[k]
    return None


def _price_records(payload) -> list[dict]:
    # FuelCheck sends a flat "prices" list next to "stations"; older
    # responses nest each station's prices under stations[*].prices.
    if isinstance(payload, dict) and isinstance(payload.get("prices"), list):
        return payload["prices"]

    stations = unwrap_list(payload, ["stations"])
    if stations is None:
        raise UnrecognizedPayloadError(
            f"Unrecognized payload shape: {type(payload).__name__}"
            + (f" with keys {sorted(payload)[:10]}" if isinstance(payload, dict) else "")
        )

    records: list[dict] = []
    for item in stations:
        if not isinstance(item, dict):
            continue
        nested = item.get("prices")
        if isinstance(nested, list):
            records.extend(nested)
        else:
            # a bare list of price records
            records.append(item)
    return records


def parse_observations(payload) -> list[PriceObservation]:
    out: list[PriceObservation] = []
    for record in _price_records(payload):
        if not isinstance(record, dict):
            continue
        code = _first(record, FUEL_CODE_KEYS)
        if code is None:
            continue
        out.append(PriceObservation(fuelTypeCode=str(code), price=_first(record, PRICE_KEYS)))
    return out
