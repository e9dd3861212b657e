"""
Prompt builder — turns the user's remix choices into the instruction text
sent alongside the original logo.

Every section header is always rendered. A blank brand name, industry or
change description is replaced by fixed filler text rather than dropping the
section, so the model always sees the same prompt skeleton.

The transparent-background line is added only when Background Color is not
preserved; with it preserved, the template itself never mentions
transparency. User-supplied text is only stripped, never rewritten.
"""

from __future__ import annotations

from typing import List, Optional

from .models import PRESERVATION_LABELS, PreservationSet

BACKGROUND_LABEL = PRESERVATION_LABELS["background_color"]

NO_BRAND_NAME = (
    "No new brand name was provided. Keep the existing text in the logo "
    "unless the changes below say otherwise."
)
NO_INDUSTRY = (
    "Not specified. Keep the logo appropriate for the sector the original "
    "design suggests."
)
NO_PRESERVED_ELEMENTS = "None specified. Use your creative judgment based on the original style."
NO_CHANGES = (
    "No specific additional changes were requested. Adapt the logo based on "
    "the new brand name, industry, and preservation settings."
)

_INTRO = (
    "You are a professional graphic designer specializing in logo adaptation. "
    "Your task is to edit the provided image based on the following specifications.\n"
    "\n"
    "**Core Task:** Adapt the existing logo style for a new brand."
)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def preserved_labels(preservation: Optional[PreservationSet]) -> List[str]:
    """Human-readable labels of the preserved attributes, in fixed order."""
    if preservation is None:
        return []
    return preservation.labels()


def build_prompt(
    brand_name: Optional[str],
    industry: Optional[str],
    change_instructions: Optional[str],
    preservation: Optional[PreservationSet],
) -> str:
    """
    Build the logo-adaptation instruction text.

    Pure and deterministic: identical inputs always give an identical string.
    ``preservation=None`` is treated as "nothing preserved".
    """
    brand = _clean(brand_name)
    sector = _clean(industry)
    changes = _clean(change_instructions)
    labels = preserved_labels(preservation)

    sections: List[str] = [_INTRO]

    if brand:
        sections.append(
            f'**New Brand Name:** "{brand}"\n'
            "This name should replace any existing text in the logo. Make it fit naturally."
        )
    else:
        sections.append(f"**New Brand Name:** {NO_BRAND_NAME}")

    if sector:
        sections.append(
            f'**Industry / Business Sector:** "{sector}"\n'
            "The new logo should be appropriate for this industry."
        )
    else:
        sections.append(f"**Industry / Business Sector:** {NO_INDUSTRY}")

    preserve_line = ", ".join(labels) if labels else NO_PRESERVED_ELEMENTS
    sections.append(f"**Elements to Preserve from Original Logo:**\n- {preserve_line}")

    sections.append(f'**Specific Changes to Make:**\n"{changes or NO_CHANGES}"')

    sections.append(_closing_block(BACKGROUND_LABEL in labels))

    return "\n\n".join(sections) + "\n"


def _closing_block(background_preserved: bool) -> str:
    lines = [
        "Please generate a new logo that incorporates the new brand name, applies the "
        "requested changes, and strictly preserves the specified elements. The output "
        "must be a high-quality image of the new logo.",
    ]
    if background_preserved:
        lines.append("Keep the original background color exactly as it is.")
    else:
        lines.append(
            f"'{BACKGROUND_LABEL}' is not a preserved element, so make the background transparent."
        )
    lines.append("Respond with the image only. Do not include any text in your response.")
    return "\n".join(lines)
