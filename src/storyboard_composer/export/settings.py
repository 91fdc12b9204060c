"""Export configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ExportSettings:
    """Settings controlling how storyboards are written."""

    # Format spec applied to every decimal value
    number_format: str = ".7g"

    # Split sprites that exceed their command limit
    fragment: bool = True

    # Line terminator for written files
    newline: str = "\n"

    def format_number(self, value: float) -> str:
        """Format a decimal value for the command stream.

        Args:
            value: The value to format.

        Returns:
            The formatted number.
        """
        text = format(float(value), self.number_format)
        if text in ("-0", "-0.0"):
            return "0"
        return text
