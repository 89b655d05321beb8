"""Configuration management for Leonardo Relay.

This module provides configuration management using Pydantic Settings.
Values are loaded from environment variables with the ``LEONARDO_RELAY_``
prefix, allowing the relay to be pointed at a different vendor payload shape
without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (LEONARDO_RELAY_* prefix, plus the legacy
   ``LEONARDO_API_KEY`` and ``PORT`` names)
2. .env file in the working directory
3. Default values defined in RelayConfig

Example .env file:
    LEONARDO_API_KEY=sk-...
    LEONARDO_RELAY_SERVER_PORT=3000
    LEONARDO_RELAY_ENHANCE_PROMPT_FIELD=promptMagic
    LEONARDO_RELAY_EXTRA_PAYLOAD={"photoReal": false}

Explicit Configuration
----------------------
There is no global configuration instance.  The launcher builds one
``RelayConfig`` and hands it to :func:`~leonardo_relay.api.main.create_app`,
which stores it on ``app.state``.

Vendor Payload Shape
--------------------
Successive deployments of the relay disagreed on which vendor parameters are
authoritative (``enhancePrompt`` vs ``promptMagic``, ``contrast`` vs
``contrastRatio``, the model identifier).  All of these are settings here:

- model_id / style_uuid: fixed identifiers sent with every job
- contrast_field / contrast: key and value of the contrast setting
- enhance_prompt_field: key of the prompt-enhancement flag
- extra_payload: arbitrary extra fields merged into every job payload
"""

from typing import Any, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://cloud.leonardo.ai/api/rest/v1"
DEFAULT_MODEL_ID = "6b645e3a-d64f-4341-a6d8-7a3690fbf042"
DEFAULT_STYLE_UUID = "111dc692-d470-4eec-b791-3475abac4c46"


class RelayConfig(BaseSettings):
    """Main configuration for Leonardo Relay.

    Attributes
    ----------
    Vendor Connection:
        api_key : str
            Bearer credential for the vendor API.  Empty means unauthenticated
            requests; the vendor's 401 is then relayed to the client.
        base_url : str
            Root of the vendor REST API (``/generations`` is appended).
        request_timeout : float
            Transport timeout in seconds for every vendor call.

    Vendor Payload:
        model_id : str
            Model identifier sent as ``modelId``.
        style_uuid : str
            Style identifier sent as ``styleUUID``.
        num_images : int
            Number of images requested per job.
        alchemy : bool
            Value of the ``alchemy`` flag.
        contrast : float
            Contrast value.
        contrast_field : Literal["contrast", "contrastRatio"]
            Payload key that carries ``contrast``.
        enhance_prompt_field : Literal["enhancePrompt", "promptMagic"]
            Payload key that carries the prompt-enhancement flag.
        extra_payload : dict
            Extra fields added to every payload; they never replace
            the client values or the fixed fields.

    Server Settings:
        server_host : str
            Bind address for the uvicorn launcher.
        server_port : int
            Bind port for the uvicorn launcher (1-65535).
        log_level : str
            Log level passed to uvicorn.

    Examples
    --------
        >>> cfg = RelayConfig(api_key="test", enhance_prompt_field="promptMagic")
        >>> cfg.enhance_prompt_field
        'promptMagic'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEONARDO_RELAY_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )

    # Vendor connection
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LEONARDO_RELAY_API_KEY", "LEONARDO_API_KEY"),
        description="Bearer credential for the vendor API",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Root URL of the vendor REST API",
    )
    request_timeout: float = Field(
        default=5.0,
        description="Transport timeout in seconds (httpx default)",
        gt=0,
    )

    # Vendor payload
    model_id: str = Field(
        default=DEFAULT_MODEL_ID,
        description="Vendor model identifier (modelId)",
    )
    style_uuid: str = Field(
        default=DEFAULT_STYLE_UUID,
        description="Vendor style identifier (styleUUID)",
    )
    num_images: int = Field(default=1, ge=1)
    alchemy: bool = Field(default=True)
    contrast: float = Field(default=3.5)
    contrast_field: Literal["contrast", "contrastRatio"] = Field(
        default="contrast",
        description="Payload key carrying the contrast value",
    )
    enhance_prompt_field: Literal["enhancePrompt", "promptMagic"] = Field(
        default="enhancePrompt",
        description="Payload key carrying the prompt-enhancement flag",
    )
    extra_payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra vendor fields merged into every job payload",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("LEONARDO_RELAY_SERVER_PORT", "PORT"),
        description="Server port",
        ge=1,
        le=65535,
    )
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(
        default="info",
        description="Log level for the uvicorn launcher",
    )

    @property
    def generations_url(self) -> str:
        """Absolute URL of the vendor's generations collection."""
        return f"{self.base_url.rstrip('/')}/generations"
