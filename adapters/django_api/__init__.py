"""
CBM Django HTTP adapter.
Thin framework glue over the cash book and membership services.
"""

from adapters.django_api.wiring import (
    ApiDependencies,
    build_dependencies,
    reset_dependencies,
)

__all__ = [
    "ApiDependencies",
    "build_dependencies",
    "reset_dependencies",
]
