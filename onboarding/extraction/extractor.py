"""AI-powered extraction of questionnaire fields from document images."""

import base64
import io
import json
from pathlib import Path

from onboarding.extraction.base import BaseExtractor
from onboarding.extraction.client_base import BaseExtractionClient
from onboarding.extraction.exceptions import ExtractionError
from onboarding.extraction.models import DocumentImage, ExtractionResult
from onboarding.extraction.prompt_loader import load_json_schema, load_prompt_template
from onboarding.extraction.validator import validate_and_build
from onboarding.forms.models import UploadedDocument
from onboarding.logging.logger import Log
from onboarding.pdf.base import BasePdfRasterizer
from onboarding.pdf.exceptions import PdfRasterizationError


class DocumentExtractor(BaseExtractor):
    """Sends the uploaded documents to a vision model and parses its JSON answer."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        rasterizer: BasePdfRasterizer,
        temperature: float = 0.0,
        zoom: float = 1.5,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "",
    ) -> None:
        self._client = client
        self._model = model
        self._rasterizer = rasterizer
        self._temperature = max(0.0, min(0.2, temperature))
        self._zoom = zoom
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def extract(self, documents: list[UploadedDocument]) -> ExtractionResult:
        images = self.to_images(documents)
        if not images:
            raise ExtractionError("No readable document images to analyze")

        prompt = self._build_prompt(images)
        Log.debug(f"Extraction prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            image_urls=[image.data_url for image in images],
            json_schema=self._json_schema_dict,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        result = validate_and_build(self._parse_json(raw_response))
        Log.info(
            "Extraction complete",
            personal_fields=len(result.personal),
            professional_fields=len(result.professional),
        )
        return result

    def to_images(self, documents: list[UploadedDocument]) -> list[DocumentImage]:
        """Inline every upload as data URLs; PDFs contribute one image per page."""
        images: list[DocumentImage] = []
        for document in documents:
            if document.is_image:
                images.append(DocumentImage(document.name, _data_url(document.mime_type, document.content)))
            elif document.is_pdf:
                images.extend(self._pdf_images(document))
            else:
                Log.warning("Skipping unsupported document for extraction", name=document.name)
        return images

    def _pdf_images(self, document: UploadedDocument) -> list[DocumentImage]:
        try:
            pages = self._rasterizer.rasterize(document.content, zoom=self._zoom)
        except PdfRasterizationError as exc:
            raise ExtractionError(f"Could not read PDF '{document.name}': {exc}") from exc
        images: list[DocumentImage] = []
        for number, page in enumerate(pages, start=1):
            buf = io.BytesIO()
            page.save(buf, format="PNG")
            images.append(DocumentImage(f"{document.name}#{number}", _data_url("image/png", buf.getvalue())))
        return images

    def _build_prompt(self, images: list[DocumentImage]) -> str:
        return self._prompt_template.format(
            document_list=", ".join(image.source_name for image in images),
            json_schema=self._json_schema,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ExtractionError("JSON response must be an object")
        return parsed


def _data_url(mime_type: str, content: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"
