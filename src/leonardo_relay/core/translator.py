"""Translate client generation requests into vendor job payloads.

The vendor expects a fixed set of fields on every job (model, style,
alchemy, contrast, image count).  Which keys carry the contrast value and
the prompt-enhancement flag is configuration, see
:class:`~leonardo_relay.core.config.RelayConfig`.
"""

from __future__ import annotations

import logging
from typing import Any

from leonardo_relay.core.config import RelayConfig
from leonardo_relay.core.errors import MissingParameter

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("prompt", "width", "height")


def validate_request(prompt: Any, width: Any, height: Any) -> None:
    """Check that every required field is present and truthy.

    Raises:
        MissingParameter: Naming every missing field, in declaration order.
    """
    values = {"prompt": prompt, "width": width, "height": height}
    missing = [name for name in REQUIRED_FIELDS if not values[name]]
    if missing:
        raise MissingParameter(missing)


def build_generation_payload(
    config: RelayConfig,
    *,
    prompt: str | None,
    width: int | None,
    height: int | None,
    enhance_prompt: bool | None = None,
) -> dict[str, Any]:
    """Build the vendor ``POST /generations`` payload for a client request.

    Width and height are forwarded as integers without range checks; the
    vendor is the authority on valid dimensions.  ``extra_payload`` from the
    configuration only adds keys: the client's values and the fixed fields
    always win.

    Args:
        config: Relay configuration holding the fixed vendor fields.
        prompt: Client prompt.
        width: Client width in pixels.
        height: Client height in pixels.
        enhance_prompt: Prompt-enhancement flag; ``None`` means ``True``.

    Returns:
        JSON-serialisable payload dictionary.

    Raises:
        MissingParameter: If ``prompt``, ``width`` or ``height`` is absent.
    """
    validate_request(prompt, width, height)

    enhance = True if enhance_prompt is None else enhance_prompt

    payload: dict[str, Any] = dict(config.extra_payload)
    payload.update(
        {
            "modelId": config.model_id,
            "prompt": prompt,
            "width": int(width),
            "height": int(height),
            "num_images": config.num_images,
            "alchemy": config.alchemy,
            "styleUUID": config.style_uuid,
            config.contrast_field: config.contrast,
            config.enhance_prompt_field: enhance,
        }
    )
    logger.debug("Built vendor payload with keys %s", sorted(payload))
    return payload
