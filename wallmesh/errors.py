"""Exceptions raised while building wall and floor meshes."""


class MeshGenerationError(Exception):
    """Base exception for mesh generation errors."""

    def __init__(self, message: str, error_type: str = "unknown"):
        super().__init__(message)
        self.error_type = error_type


class InsufficientPointsError(MeshGenerationError):
    """Fewer points than the builder needs."""

    def __init__(self, message: str):
        super().__init__(message, error_type="insufficient_points")


class DegenerateSegmentError(MeshGenerationError):
    """Zero-length segment or tangent with no defined normal."""

    def __init__(self, message: str):
        super().__init__(message, error_type="degenerate_segment")


class InvalidParameterError(MeshGenerationError):
    """Non-positive thickness/height/depth or out-of-range tension."""

    def __init__(self, message: str):
        super().__init__(message, error_type="invalid_parameter")


class ExtrusionError(MeshGenerationError):
    """Boundary loop could not be triangulated or extruded."""

    def __init__(self, message: str):
        super().__init__(message, error_type="extrusion")
