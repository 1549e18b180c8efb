"""
Response schemas passed to Gemini JSON mode.
"""

from google.genai import types


def _string():
    return types.Schema(type=types.Type.STRING)


def _localized():
    return types.Schema(
        type=types.Type.OBJECT,
        properties={"en": _string(), "zh": _string()},
        required=["en", "zh"],
    )


REQUIREMENTS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "customerName": _string(),
        "requirements": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "id": _string(),
                    "text": _string(),
                    "summaryEn": _string(),
                    "sourcePage": types.Schema(type=types.Type.INTEGER),
                },
                required=["id", "text"],
            ),
        ),
    },
    required=["customerName", "requirements"],
)

_SCORES = types.Schema(
    type=types.Type.OBJECT,
    properties={
        metric: types.Schema(type=types.Type.NUMBER)
        for metric in ("match", "trend", "market", "innovation", "harmony")
    },
    required=["match", "trend", "market", "innovation", "harmony"],
)

SCHEMES_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "id": _string(),
            "name": _localized(),
            "description": _localized(),
            "palette": types.Schema(
                type=types.Type.OBJECT,
                properties={"primary": _string(), "secondary": _string(), "accent": _string()},
                required=["primary", "secondary", "accent"],
            ),
            "scores": _SCORES,
            "sources": types.Schema(type=types.Type.ARRAY, items=_string()),
            "usageAdvice": _localized(),
            "swot": types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "strengths": types.Schema(type=types.Type.ARRAY, items=_localized()),
                    "weaknesses": types.Schema(type=types.Type.ARRAY, items=_localized()),
                },
            ),
        },
        required=["id", "name", "description", "palette", "scores", "usageAdvice"],
    ),
)
