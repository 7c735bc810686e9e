# src/poshanix_proxy/core/detect.py
from __future__ import annotations
import re
from typing import Optional

# Keyword stems that mark text as nutrition-relevant.
# Stems, not words: "calori" hits calorie/calories/Calorias, "carbohydrat" hits carbohydrate(s).
NUTRITION_STEMS = (
    "calori",
    "serving",
    "ingredient",
    "protein",
    "fat",
    "carbohydrat",
    "sodium",
    "vitamin",
    "calcium",
    "iron",
    "fiber",
    "sugar",
)

_NUTRITION_RE = re.compile("|".join(NUTRITION_STEMS), re.IGNORECASE)


def is_nutrition_text(text: Optional[str]) -> bool:
    """
    Cheap gate in front of the OCR endpoint: does the model reply talk about
    nutrition at all? Any stem anywhere in the text is enough.
    """
    if not text:
        return False
    return _NUTRITION_RE.search(text) is not None
