from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException
import uvicorn

from eventcompat.compat import patch_v1_compat
from eventcompat.contracts.validation import validate_envelope_dict
from eventcompat.core.errors import EventCompatError
from eventcompat.core.models import CloudEvent
from eventcompat.core.settings import load_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="eventcompat API")


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/compat/preview")
def compat_preview(event: Dict[str, Any] = Body(...)) -> dict:
    """Validate a structured-mode CloudEvent and return it with its v1 views."""
    try:
        validate_envelope_dict(event)
        patched = patch_v1_compat(CloudEvent.from_dict(event))
    except EventCompatError as e:
        logger.info("compat_preview_rejected", extra={"error": str(e)})
        raise HTTPException(status_code=422, detail=str(e)) from e
    return patched.to_dict()


def main() -> None:
    s = load_settings()
    logging.basicConfig(level=s.log_level)
    logger.info(f"Starting eventcompat API env={s.env} on {s.api_host}:{s.api_port}")
    uvicorn.run(app, host=s.api_host, port=s.api_port)


if __name__ == "__main__":
    main()
