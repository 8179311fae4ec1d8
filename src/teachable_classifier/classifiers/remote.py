"""Remote generative classifier backed by the Google Gemini API.

Never raises: a missing API key or any request/response problem yields an
``Error`` result with zero confidence.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Sequence
from typing import Any

import requests
from loguru import logger

from teachable_classifier.config import RemoteSettings
from teachable_classifier.errors import SampleDecodeError
from teachable_classifier.imaging import split_data_url
from teachable_classifier.schemas.classes import EncodedSample
from teachable_classifier.schemas.prediction import PredictionResult
from teachable_classifier.types import ModelType

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "className": {"type": "STRING"},
        "confidence": {"type": "NUMBER"},
        "reasoning": {"type": "STRING"},
    },
    "required": ["className", "confidence", "reasoning"],
}


class GeminiImageClassifier:
    """Ask a multimodal Gemini model to pick one of the given class names."""

    def __init__(self, settings: RemoteSettings | None = None) -> None:
        self.settings = settings or RemoteSettings()

    def classify(
        self, image: EncodedSample, class_names: Sequence[str]
    ) -> PredictionResult:
        if not self.settings.api_key:
            logger.error("Gemini API key not configured")
            return PredictionResult.error(ModelType.REMOTE, "API Key Missing")

        try:
            payload = self._build_payload(image, class_names)
            data = self._send_request(payload)
            return self._parse_response(data)
        except (
            requests.RequestException,
            SampleDecodeError,
            ValueError,
            KeyError,
            IndexError,
            TypeError,
        ) as exc:
            logger.error(f"Gemini classification error: {exc}")
            return PredictionResult.error(ModelType.REMOTE, "API Request Failed")

    def _build_payload(
        self, image: EncodedSample, class_names: Sequence[str]
    ) -> dict[str, Any]:
        mime_type, raw = split_data_url(image)
        prompt = (
            "Analyze this image and classify it into exactly one of the "
            f"following categories: [{', '.join(class_names)}].\n"
            "Return the class name, a confidence score between 0 and 1, "
            "and a short reasoning."
        )
        return {
            "contents": [
                {
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(raw).decode("ascii"),
                            }
                        },
                        {"text": prompt},
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    def _send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = (
            f"{self.settings.base_url.rstrip('/')}/models/"
            f"{self.settings.model}:generateContent"
        )
        response = requests.post(
            url,
            params={"key": self.settings.api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.settings.timeout,
        )
        response.raise_for_status()
        return response.json()  # type: ignore[no-any-return]

    def _parse_response(self, data: dict[str, Any]) -> PredictionResult:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise ValueError("Empty response")
        result = json.loads(text)

        class_name = str(result["className"]).strip()
        try:
            confidence = float(result.get("confidence", 0.0))
        except (TypeError, ValueError):
            confidence = 0.0
        reasoning = result.get("reasoning")
        return PredictionResult(
            model_name=ModelType.REMOTE,
            class_name=class_name,
            confidence=max(0.0, min(1.0, confidence)),
            reasoning=str(reasoning) if reasoning is not None else None,
        )
