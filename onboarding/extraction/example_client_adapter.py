"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import ClassVar

from onboarding.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Returns a fixed payload where the provider found nothing.

    No network calls. Useful for local development and tests: merging this
    response leaves the questionnaire untouched.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "personal": {
            "full_name": None,
            "birth_date": None,
            "gender": None,
            "marital_status": None,
            "nationality": None,
            "rg": None,
            "cpf": None,
            "zip_code": None,
            "address": None,
            "number": None,
            "complement": None,
            "neighborhood": None,
            "city": None,
        },
        "professional": {"creci_number": None},
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_urls: list[str],
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, image_urls, json_schema
        return json.dumps(self.DEFAULT_RESPONSE)
