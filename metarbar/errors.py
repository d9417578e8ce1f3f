class MetarError(Exception):
    """Base class for errors surfaced by the METAR pipeline."""


class MalformedRecord(MetarError):
    """A single payload element is not a weather record."""


class MalformedBatch(MetarError):
    """The payload is not a decodable sequence of weather records.

    Fatal to the refresh cycle that received it: no partial result is produced.
    """


class MetarServiceError(MetarError):
    """The weather API could not be reached or answered with an error."""
