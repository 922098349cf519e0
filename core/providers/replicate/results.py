"""Normalisation of prediction output into a single result URL."""

from __future__ import annotations

from typing import List, Union

from config.replicate import defaults as replicate_defaults
from core.exceptions import EmptyResultError


def extract_primary_url(output: Union[str, List[str], None]) -> str:
    """Return the first URL of a prediction output.

    Replicate reports either a single URL or a list of URLs; an empty list,
    empty string or missing output raises :class:`EmptyResultError`.
    """

    if isinstance(output, (list, tuple)):
        candidate = output[0] if output else None
    else:
        candidate = output

    if not candidate or not isinstance(candidate, str):
        raise EmptyResultError(
            "Replicate extract: result contained no video URL",
            provider=replicate_defaults.PROVIDER_NAME,
            stage="extract",
        )
    return candidate


__all__ = ["extract_primary_url"]
