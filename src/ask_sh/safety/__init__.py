"""Rule-based approval gate for shell commands."""

from ask_sh.safety.classifier import (
    REASON_DATABASE,
    REASON_DESTRUCTIVE_GIT,
    REASON_FILES,
    REASON_GIT,
    REASON_NETWORK,
    REASON_PACKAGES,
    REASON_RISKY,
    REASON_SYSTEM,
    SAFE,
    ApprovalDecision,
    classify,
    extract_base_command,
)

__all__ = [
    "ApprovalDecision",
    "SAFE",
    "classify",
    "extract_base_command",
    "REASON_GIT",
    "REASON_DESTRUCTIVE_GIT",
    "REASON_FILES",
    "REASON_PACKAGES",
    "REASON_NETWORK",
    "REASON_SYSTEM",
    "REASON_DATABASE",
    "REASON_RISKY",
]
