class FuelPriceError(Exception):
    """Base class for fuel price pipeline failures."""


class UpstreamError(FuelPriceError):
    """The price feed could not be fetched or understood."""


class UnrecognizedPayloadError(UpstreamError):
    """The price feed returned a payload shape we don't know how to read."""


class StoreError(FuelPriceError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass
