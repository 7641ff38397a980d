"""Configuration models for tree construction and display."""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

# Type aliases
HashAlgorithm = Literal["sha256", "sha3_256", "blake2b", "sha512"]

HASH_ALGORITHM_ENV = "MERKLE_HASH_ALGORITHM"
DISPLAY_HASH_LENGTH_ENV = "MERKLE_DISPLAY_HASH_LENGTH"


class TreeSettings(BaseModel):
    """Settings shared by tree construction, verification and rendering."""
    hash_algorithm: HashAlgorithm = Field(
        "sha256",
        description="hashlib algorithm used for leaf and internal node digests."
    )
    display_hash_length: int = Field(
        8,
        ge=4,
        description="Number of hex characters kept when abbreviating a digest for display."
    )

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'TreeSettings':
        """
        Load settings from environment variables.

        Unset variables fall back to the field defaults. Invalid values raise
        a pydantic ``ValidationError``.
        """
        env = os.environ if environ is None else environ
        values = {}
        if env.get(HASH_ALGORITHM_ENV):
            values["hash_algorithm"] = env[HASH_ALGORITHM_ENV].strip().lower()
        if env.get(DISPLAY_HASH_LENGTH_ENV):
            values["display_hash_length"] = env[DISPLAY_HASH_LENGTH_ENV].strip()
        return cls(**values)
