# models/options.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReadabilityOptions(BaseModel):
    """
    Immutable configuration record for a single extraction run.

    Every field has a documented default, so ``ReadabilityOptions()`` is the
    stock configuration.  Callers override individual values either at
    construction time or through :meth:`merged`.
    """

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    retry_length: int = Field(
        default=250,
        ge=0,
        description="Minimum viable content length for calling code (not used by the core)",
    )
    min_text_length: int = Field(
        default=25,
        ge=0,
        description="Paragraphs shorter than this are not scored; also the short-content cut-off",
    )
    remove_unlikely_candidates: bool = True
    weight_classes: bool = True

    # ------------------------------------------------------------------
    # Sanitization
    # ------------------------------------------------------------------
    clean_conditionally: bool = True
    remove_empty_nodes: bool = True
    tags: List[str] = Field(
        default_factory=lambda: ["div", "p"],
        description="Tags kept (attributes stripped) by whitelist flattening",
    )
    attributes: Optional[List[str]] = Field(
        default=None,
        description="Attribute names exempted from stripping on whitelisted tags",
    )

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    min_image_width: int = Field(default=130, ge=0)
    min_image_height: int = Field(default=80, ge=0)
    ignore_image_format: List[str] = Field(default_factory=list)
    image_probe_timeout: float = Field(default=10.0, gt=0)
    image_probe_workers: int = Field(default=4, ge=1)

    # ------------------------------------------------------------------
    # Input selection & decoding
    # ------------------------------------------------------------------
    blacklist: Optional[str] = Field(
        default=None,
        description="CSS selector; matching elements are removed before scoring",
    )
    whitelist: Optional[str] = Field(
        default=None,
        description="CSS selector; when set, body content is replaced by the matches",
    )
    encoding: Optional[str] = None
    guess_encoding: bool = True
    html_headers: Optional[Dict[str, str]] = None

    debug: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("tags", "ignore_image_format")
    @classmethod
    def _lowercase_names(cls, values: List[str]) -> List[str]:
        return [v.strip().lower().lstrip(".") for v in values if v and v.strip()]

    @classmethod
    def merged(
        cls,
        base: Union["ReadabilityOptions", Mapping[str, Any], None] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "ReadabilityOptions":
        """
        Merge ``overrides`` over ``base`` (itself merged over the defaults).

        ``base`` may be an existing options object, a plain mapping or ``None``.
        Unknown keys raise :class:`pydantic.ValidationError`.
        """
        if isinstance(base, ReadabilityOptions):
            values = base.model_dump(exclude_unset=True)
        else:
            values = dict(base or {})
        values.update(overrides or {})
        return cls(**values)
