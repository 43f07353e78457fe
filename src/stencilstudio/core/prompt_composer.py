"""Prompt composition for stencil and woodcut generation.

The final prompt is built from two fixed parts::

    [Style base instruction]

    **Line Thickness Instruction:** [Thickness clause]

The thickness section is only present for stencil styles. For the woodcut
style the prompt is exactly the woodcut base instruction, whatever thickness
is selected.

Usage
-----
::

    prompt = compose_prompt(Style.STENCIL, Thickness.BOLD)
"""

from __future__ import annotations

from .styles import STYLE_PROMPTS, THICKNESS_PROMPTS, Style, Thickness

THICKNESS_HEADING = "**Line Thickness Instruction:**"
SECTION_SEPARATOR = "\n\n"


def base_prompt(style: Style | str) -> str:
    """Return the fixed base instruction for *style*."""
    return STYLE_PROMPTS[Style(style)]


def thickness_clause(thickness: Thickness | str) -> str:
    """Return the line-weight clause for *thickness*."""
    return THICKNESS_PROMPTS[Thickness(thickness)]


def compose_prompt(style: Style | str, thickness: Thickness | str) -> str:
    """Compose the instruction sent to the image model.

    Args:
        style: Selected style (enum member or its string value)
        thickness: Selected line thickness (enum member or its string value)

    Returns:
        The composed prompt. Identical inputs always give identical output.

    Raises:
        ValueError: If a string value does not name a Style or Thickness
    """
    style = Style(style)
    thickness = Thickness(thickness)

    base = STYLE_PROMPTS[style]
    if not style.is_stencil:
        return base

    return f"{base}{SECTION_SEPARATOR}{THICKNESS_HEADING} {THICKNESS_PROMPTS[thickness]}"
