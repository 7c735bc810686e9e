# src/poshanix_proxy/core/prompts.py

from __future__ import annotations
from typing import Any, Dict, List, Optional

from poshanix_proxy.models import UserProfile


SYSTEM_INSTRUCTION = """You are a medical and nutrition data processing assistant.

INPUT CONTEXT:
You will receive RAW OCR text extracted from food labels or ingredient lists.
The OCR text may contain:
- spelling mistakes
- broken words
- random symbols
- duplicated or misplaced lines
- marketing text, addresses, logos
- incomplete or misaligned nutrition tables

PRIMARY OBJECTIVE:
Convert noisy OCR text into clean, structured nutrition data and provide
STRICTLY medical and nutrition-related guidance based ONLY on that data.

MANDATORY RULES (NON-NEGOTIABLE):
1. DO NOT guess, infer, estimate, or assume any value.
2. If a value is missing, unclear, or unreadable, use null.
3. DO NOT add nutrients, ingredients, or values not present in the OCR text.
4. DO NOT provide diagnosis, treatment, or medication advice.
5. DO NOT provide lifestyle, fitness, or general wellness advice.
6. DO NOT include disclaimers or legal language.
7. DO NOT mention brands, packaging, marketing claims, or addresses.
8. DO NOT explain your reasoning.
9. Output MUST be valid JSON only: no markdown, no text outside JSON.
10. Advice must be DIRECTLY justified by extracted nutrition values.

PROCESSING STEPS (FOLLOW IN ORDER):
STEP 1 - CLEANING: correct obvious OCR spelling errors, remove noise, normalize units, preserve numeric values exactly.
STEP 2 - EXTRACTION: extract nutrition facts only if explicitly present (serving size, calories, macronutrients, sodium, potassium, vitamins/minerals, ingredients).
STEP 3 - MEDICAL & NUTRITION INTERPRETATION: generate short factual observations justified by extracted values. If none, return empty advice array.

RESPONSE STYLE:
- Keep responses SHORT and PRECISE. Use as few words as necessary while remaining clinically clear.
- Prefer one-sentence factual observations for each advice item.
- When returning JSON, keep it compact (no extra whitespace) and only include required fields.

OUTPUT FORMAT: Return STRICT JSON with keys: cleaned_text, nutrition_facts, ingredients, medical_nutrition_advice.
Any violation of format or rules is considered a failure."""

GENERIC_ASSISTANT = (
    "You are a helpful nutrition and health assistant. "
    "Provide concise, friendly, and supportive advice."
)

PROFILE_ASSISTANT = (
    "You are a helpful nutrition and health assistant. "
    "Here is the user's health profile:\n\n{profile}\n\n"
    "Use this information to provide personalized nutrition and health advice. "
    "Be concise, friendly, and supportive."
)


def build_ocr_messages(ocr_text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {"role": "user", "content": f"OCR TEXT:\n{ocr_text}"},
    ]


def _fmt(value: Any) -> str:
    # 70.0 -> "70" so whole numbers read the way the profile form stores them
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def profile_lines(profile: UserProfile) -> List[str]:
    """
    Human-readable lines for every profile field that is present (truthy).
    Weight and height only appear together with their unit.
    """
    p = profile
    lines: List[str] = []
    if p.age:
        lines.append(f"Age: {_fmt(p.age)} years")
    if p.gender:
        lines.append(f"Gender: {p.gender}")
    if p.weight and p.weight_unit:
        lines.append(f"Weight: {_fmt(p.weight)} {p.weight_unit}")
    if p.height and p.height_unit:
        lines.append(f"Height: {_fmt(p.height)} {p.height_unit}")
    if p.bmi:
        lines.append(f"BMI: {_fmt(p.bmi)}")
    if p.bmr:
        lines.append(f"BMR: {_fmt(p.bmr)} kcal/day")
    if p.water_intake:
        lines.append(f"Daily water intake: {_fmt(p.water_intake)}")
    if p.eating_habits:
        lines.append(f"Eating habits: {p.eating_habits.replace('_', ' ')}")
    if p.food_allergies:
        lines.append(f"Food allergies: {p.food_allergies}")
    if p.workout_level:
        lines.append(f"Workout level: {p.workout_level}")
    return lines


def build_profile_context(profile: Optional[UserProfile]) -> str:
    """System message for the chat endpoint, personalised when a profile is known."""
    if profile is None:
        return GENERIC_ASSISTANT
    lines = profile_lines(profile)
    if not lines:
        return GENERIC_ASSISTANT
    return PROFILE_ASSISTANT.format(profile="\n".join(lines))


def build_chat_messages(message: str, profile: Optional[UserProfile]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": build_profile_context(profile)},
        {"role": "user", "content": message},
    ]
