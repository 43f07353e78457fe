"""Style and line-thickness presets.

A preset pair (Style, Thickness) is everything the user chooses besides the
photo itself. Both are closed enums; every table in this module is keyed by
enum member and must cover all members (checked by the test suite).

Prompt texts are fixed instructions for the image model. Stencil styles
describe closed-path, connected, two-tone geometry suitable for laser/CNC
cutting; the woodcut style describes carved shapes on a wood texture and
does not take a line-thickness instruction.
"""

from __future__ import annotations

from enum import Enum


class Style(str, Enum):
    """Visual transformation preset."""

    STENCIL = "stencil"
    STENCIL_V2 = "stencil_v2"
    STENCIL_V3 = "stencil_v3"
    WOODCUT = "woodcut"

    @property
    def is_stencil(self) -> bool:
        """True for styles that accept a line-thickness instruction."""
        return self is not Style.WOODCUT

    @property
    def label(self) -> str:
        return STYLE_LABELS[self]

    @property
    def description(self) -> str:
        return STYLE_DESCRIPTIONS[self]


class Thickness(str, Enum):
    """Line-weight preset for fine detail areas (stencil styles only)."""

    THIN = "thin"
    MEDIUM = "medium"
    BOLD = "bold"

    @property
    def label(self) -> str:
        return THICKNESS_LABELS[self]


DEFAULT_STYLE = Style.STENCIL
DEFAULT_THICKNESS = Thickness.MEDIUM

STYLE_LABELS: dict[Style, str] = {
    Style.STENCIL: "Laser-Cut Stencil",
    Style.STENCIL_V2: "High-Contrast Stencil",
    Style.STENCIL_V3: "Simple Silhouette",
    Style.WOODCUT: "Woodcut Art",
}

STYLE_DESCRIPTIONS: dict[Style, str] = {
    Style.STENCIL: "Detailed & clean for laser cutting.",
    Style.STENCIL_V2: "Bold, connected shapes for CNC.",
    Style.STENCIL_V3: "Simplified for max cut-ability.",
    Style.WOODCUT: "Artistic carved look on a wood texture.",
}

THICKNESS_LABELS: dict[Thickness, str] = {
    Thickness.THIN: "Thin",
    Thickness.MEDIUM: "Medium",
    Thickness.BOLD: "Bold",
}

# ---------------------------------------------------------------------------
# Base instructions, one per style.
# ---------------------------------------------------------------------------

_STENCIL_PROMPT = """Create a clean, high-contrast stencil vector portrait from the provided photo, specifically designed for laser cutting, CNC, or Glowforge. The final artwork must adhere to these strict requirements:
1. **Line Quality:** All lines must be smooth, clean, and flowing with a consistent thin-to-medium thickness suitable for cutting. Avoid any rough, jagged, shaky, or pixelated edges. The output should look like a professional, manually drawn vector illustration.
2. **Closed Shapes:** All shapes must be fully closed paths with no open strokes. All regions must connect properly to create a single, cohesive piece. Absolutely no floating "islands" are allowed.
3. **Minimal Fills:** Use solid black fills sparingly, only for essential areas like hair or deep shadows. The design should primarily use elegant contour lines and open shapes, not heavy black blocks.
4. **Stylized Features:** Simplify facial features while retaining likeness. Eyes should be stylized, nose and cheek lines should be minimal, and lips should be cleanly shaped. Smile lines must be smooth, curved, and simple.
5. **Overall Style:** The final result must be a simple, elegant, and clean stencil illustration, perfectly cuttable, consisting of only two tones: solid black shapes and a transparent background."""

_STENCIL_V2_PROMPT = """Create a clean, high-contrast stencil vector portrait based on the provided photo. The goal is a CNC-ready artwork that captures likeness with elegant, flowing lines.

Key Requirements:
1.  **Line & Shape:** Use smooth, clean lines and fully closed paths. Allow for some variation in line thickness to capture finer details, like curls and folds in clothing, while ensuring all parts are substantial enough for laser cutting.
2.  **Detail Retention:** Pay close attention to the subtle details in clothing. Replicate gentle curves, folds, and collar shapes accurately. Avoid over-simplifying these areas.
3.  **Connected Geometry:** All black shapes must be connected into a single, cohesive piece. There should be absolutely no floating "islands" or disconnected parts.
4.  **Stylization:** Simplify facial features into stylized but recognizable forms. The final piece should feel like a handcrafted illustration, not a direct trace. Use only solid black shapes on a clear background, with no gradients or shading.
5.  **Lip and Mouth Design:** Pay special attention to the mouth area. Stylize the lips with a clean, continuous outline. If the mouth is open in a smile, represent the opening as a single, solid, connected shape, avoiding individual teeth. This shape should flow smoothly and connect to the surrounding facial lines to ensure a cohesive, cuttable design."""

_STENCIL_V3_PROMPT = (
    "Generate a CNC-ready stencil illustration from the provided image. Use only solid "
    "black vector regions with closed paths. No open lines, no loose islands, no gradients. "
    "Simplify all features into connected stencil geometry suitable for laser cutting or "
    "Glowforge. Maintain likeness using stylized contour shapes and bold silhouettes."
)

_WOODCUT_PROMPT = (
    "Transform the given photo into a highly detailed woodcut-style vector artwork. Use bold, "
    "clean black carved shapes over a light wooden background texture. Maintain facial "
    "likeness while simplifying features into elegant, flowing contour lines. Ensure the "
    "final artwork looks suitable for CNC, laser engraving, or stencil cutting—high "
    "contrast, no gradients, only solid filled regions and negative space. The final "
    "aesthetic should be that of a warm wood panel."
)

STYLE_PROMPTS: dict[Style, str] = {
    Style.STENCIL: _STENCIL_PROMPT,
    Style.STENCIL_V2: _STENCIL_V2_PROMPT,
    Style.STENCIL_V3: _STENCIL_V3_PROMPT,
    Style.WOODCUT: _WOODCUT_PROMPT,
}

# ---------------------------------------------------------------------------
# Line-weight clauses, appended to stencil prompts only.
# ---------------------------------------------------------------------------

THICKNESS_PROMPTS: dict[Thickness, str] = {
    Thickness.THIN: (
        "For fine details like hair and clothing curls, apply a thin and delicate line "
        "weight. Ensure even these fine lines remain connected and form closed, cuttable "
        "shapes without becoming fragile."
    ),
    Thickness.MEDIUM: (
        "For fine details like hair and clothing curls, use a balanced, medium line "
        "weight. This should provide good detail without sacrificing structural integrity."
    ),
    Thickness.BOLD: (
        "For fine details like hair and clothing curls, use a thick, bold line weight. "
        "This will simplify intricate areas into stronger shapes, prioritizing durability "
        "for cutting."
    ),
}
