"""Shared API schemas."""

from seekpage.core.schemas.problem_details import ProblemDetails

__all__ = ["ProblemDetails"]
