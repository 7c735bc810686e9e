# src/poshanix_proxy/models.py
from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]

# profile forms store numbers, but older rows hold them as strings
Number = Union[int, float, str]


# ============================================================
# Requests
# ============================================================

class ChatMessage(BaseModel):
    role: Role
    content: str


class UserProfile(BaseModel):
    """Health profile as stored by the app's onboarding form. Every field optional."""

    model_config = ConfigDict(extra="ignore")

    age: Optional[Number] = None
    gender: Optional[str] = None
    weight: Optional[Number] = None
    weight_unit: Optional[str] = None
    height: Optional[Number] = None
    height_unit: Optional[str] = None
    bmi: Optional[Number] = None
    bmr: Optional[Number] = None
    water_intake: Optional[Number] = None
    eating_habits: Optional[str] = None
    food_allergies: Optional[str] = None
    workout_level: Optional[str] = None


class OcrRequest(BaseModel):
    text: Optional[str] = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: Optional[List[ChatMessage]] = None
    message: Optional[str] = None
    user_profile: Optional[UserProfile] = Field(default=None, alias="userProfile")


# ============================================================
# Responses
# ============================================================

class NutritionPayload(BaseModel):
    """Shape the OCR system prompt asks the model for. Returned as parsed, not re-validated."""

    model_config = ConfigDict(extra="allow")

    cleaned_text: Optional[str] = None
    nutrition_facts: Optional[Dict[str, Any]] = None
    ingredients: Optional[Any] = None
    medical_nutrition_advice: Optional[List[Any]] = None


class WaitingResponse(BaseModel):
    status: Literal["waiting_for_food_ocr"] = "waiting_for_food_ocr"
    message: str = "Scan a food label to get nutrition information."


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "poshanix-ai-proxy"
