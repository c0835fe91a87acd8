"""Translation of service errors into HTTP responses."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status

from ..errors import EntityConflictError, EntityNotFoundError, InvalidInputError, UpstreamFailureError

LOG = logging.getLogger(__name__)


@contextmanager
def translate_errors() -> Iterator[None]:
    try:
        yield
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except EntityConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except InvalidInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except UpstreamFailureError as exc:
        LOG.exception("Upstream failure")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
