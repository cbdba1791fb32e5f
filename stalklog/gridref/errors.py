"""Grid reference error hierarchy.

Each error carries the offending text and a machine-readable ``kind`` so the
web layer and the importer can report *why* a reference was rejected.
"""


class GridReferenceError(ValueError):
    """Base exception for all grid reference errors."""

    kind = "grid_reference_error"

    def __init__(self, text: str, message: str):
        self.text = text
        super().__init__(message)


class MalformedReference(GridReferenceError):
    """Not two letters followed by a run of digits."""

    kind = "malformed_reference"

    def __init__(self, text: str):
        super().__init__(text, f"Malformed grid reference: '{text}'")


class OddDigitCount(GridReferenceError):
    """The digits cannot be split evenly into easting and northing."""

    kind = "odd_digit_count"

    def __init__(self, text: str, digits: int):
        self.digits = digits
        super().__init__(
            text, f"Grid reference '{text}' has an odd number of digits ({digits})"
        )


class UnknownGridSquare(GridReferenceError):
    """The two-letter prefix is not a National Grid square."""

    kind = "unknown_grid_square"

    def __init__(self, text: str, letters: str):
        self.letters = letters
        super().__init__(text, f"Unknown grid square '{letters}' in '{text}'")


class PrecisionOverflow(GridReferenceError):
    """More than five digits per axis."""

    kind = "precision_overflow"

    def __init__(self, text: str, digits: int):
        self.digits = digits
        super().__init__(
            text, f"Grid reference '{text}' has {digits} digits (max 10)"
        )


class ProjectionDivergence(GridReferenceError):
    """The inverse Transverse Mercator latitude iteration did not converge."""

    kind = "projection_divergence"

    def __init__(self, easting: float, northing: float, iterations: int):
        self.easting = easting
        self.northing = northing
        self.iterations = iterations
        super().__init__(
            f"{easting} {northing}",
            f"Inverse projection did not converge for E={easting} N={northing} "
            f"after {iterations} iterations",
        )
