from typing import Dict, Optional
from enum import Enum


DYNAMIC_THINKING_BUDGET = -1


class ThinkingLevel(str, Enum):
    """User-selectable reasoning budget levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    DYNAMIC = "dynamic"

    @classmethod
    def default(cls) -> "ThinkingLevel":
        """Level used for new and unset sessions"""
        return cls.MEDIUM

    @classmethod
    def parse(cls, value: Optional[str]) -> "ThinkingLevel":
        """Parse a stored or callback value, falling back to the default"""

        try:
            return cls(value)
        except ValueError:
            return cls.default()

    @property
    def budget(self) -> int:
        """Reasoning token budget sent to the completion service"""
        return _BUDGETS[self]

    @property
    def label(self) -> str:
        """Human readable label shown in the settings menu"""
        return _LABELS[self]


# DYNAMIC maps to the service sentinel that lets the model pick its own budget
_BUDGETS: Dict[ThinkingLevel, int] = {
    ThinkingLevel.LOW: 4096,
    ThinkingLevel.MEDIUM: 16384,
    ThinkingLevel.HIGH: 32768,
    ThinkingLevel.DYNAMIC: DYNAMIC_THINKING_BUDGET,
}

_LABELS: Dict[ThinkingLevel, str] = {
    ThinkingLevel.LOW: "Low - 4,096 tokens",
    ThinkingLevel.MEDIUM: "Medium - 16,384 tokens",
    ThinkingLevel.HIGH: "High - 32,768 tokens",
    ThinkingLevel.DYNAMIC: "Dynamic reasoning",
}
